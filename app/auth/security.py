from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from jose import JWTError, jwt, ExpiredSignatureError
from pydantic import ValidationError


from app.core.config import settings
from app.schemas import TokenPayload
from app.utils.exception_utils import CredentialsException


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify that a plain text password matches its hashed version.

    Args:
        plain_password (str): User provided password.
        hashed_password (str): Stored hashed password.

    Returns:
        bool: True if password matches.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a plaintext password using bcrypt.

    Args:
        password (str): User password.

    Returns:
        str: Hashed password.
    """
    return pwd_context.hash(password)


def _encode(subject: str, jti: str, token_type: str, expire: datetime, secret_key: str) -> str:
    payload = {"exp": expire, "sub": str(subject), "jti": jti, "type": token_type}
    return jwt.encode(payload, secret_key, algorithm=settings.ALGORITHM)


def create_access_token(subject: str, jti: str) -> str:
    """
    Create a short-lived JWT access token.

    Args:
        subject (str): User ID.
        jti (str): Unique token identifier shared with the session.

    Returns:
        str: Encoded access token.
    """
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    return _encode(subject, jti, "access", expire, settings.ACCESS_TOKEN_SECRET_KEY)


def create_refresh_token(subject: str, jti: str) -> str:
    """
    Create a long-lived JWT refresh token.

    Args:
        subject (str): User ID.
        jti (str): Unique token identifier shared with the session.

    Returns:
        str: Encoded refresh token.
    """
    expire = datetime.now(timezone.utc) + timedelta(
        hours=settings.REFRESH_TOKEN_EXPIRE_HOURS
    )
    return _encode(subject, jti, "refresh", expire, settings.REFRESH_TOKEN_SECRET_KEY)


def decode_token(token: str, secret_key: str) -> TokenPayload:
    """
    Decode a JWT and validate signature, expiration, and structure.

    Args:
        token (str): JWT token string.
        secret_key (str): Key used to decode token.

    Returns:
        TokenPayload: Parsed token payload data.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[settings.ALGORITHM])
        return TokenPayload(**payload)

    except ExpiredSignatureError:
        raise CredentialsException(detail="Token has expired")

    except (JWTError, ValidationError):
        raise CredentialsException()
