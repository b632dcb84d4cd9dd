from typing import List, Optional
from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    Configuration settings for the application, loaded from .env file and environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "vahaan"
    DATABASE_URL: Optional[str] = None

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        Return the SQLAlchemy async database URL.

        Args:
            None

        Returns:
            str: DATABASE_URL when set, otherwise the async PostgreSQL URL.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    PROJECT_NAME: str = "Vahaan"
    API_STR: str = "/api"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Find your dream car: listings, test drives and dealership admin."

    ACCESS_TOKEN_SECRET_KEY: str
    REFRESH_TOKEN_SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_HOURS: int = 168
    MAX_SESSIONS_PER_USER: int = 3

    SUPER_ADMIN_NAME: str
    SUPER_ADMIN_EMAIL: EmailStr
    SUPER_ADMIN_PASSWORD: str

    DEALERSHIP_NAME: str = "Vahaan Motors"
    DEALERSHIP_ADDRESS: str = "69 Car Street, Autoville, CA 69420"
    DEALERSHIP_PHONE: str = "+1 (555) 123-4567"
    DEALERSHIP_EMAIL: str = "contact@vahaan.com"

    AZURE_STORAGE_CONNECTION_STRING: str
    CAR_IMAGES_CONTAINER_NAME: str = "car-images"

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS_PER_MINUTE: int = 120
    RATE_LIMIT_REQUESTS_PER_HOUR: int = 2000
    RATE_LIMIT_REQUESTS_PER_DAY: int = 20000
    AI_RATE_LIMIT_PER_HOUR: int = 10

    # Vision model settings

    OPENAI_API_KEY: str
    OPENAI_API_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_VISION_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.2
    OPENAI_MAX_TOKENS: int = 1000

    LANGSMITH_TRACING: str = "false"
    LANGSMITH_API_KEY: Optional[str] = None
    LANGSMITH_PROJECT: str = "vahaan-vision"
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1"]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


settings = get_settings()
