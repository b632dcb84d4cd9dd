from fastapi import Request
import redis.asyncio as redis
from typing import Dict, Any, Tuple
from fastapi.responses import JSONResponse


from app.core.config import settings
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


TIME_WINDOWS = {
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}

METHOD_WEIGHTS = {
    "GET": 1,
    "POST": 2,
    "PUT": 2,
    "DELETE": 3,
    "PATCH": 2,
}


class RateLimitMiddleware:
    """
    Class implementing rate limiting middleware using Redis.
    Applies per-IP and per-endpoint fixed-window limits.
    """
    def __init__(self):
        connection_params = {
            "host": settings.REDIS_HOST,
            "port": settings.REDIS_PORT,
            "db": settings.REDIS_DB,
            "decode_responses": True,
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
            "retry_on_timeout": True,
        }

        # Add password only if provided
        if settings.REDIS_PASSWORD and settings.REDIS_PASSWORD.strip():
            connection_params["password"] = settings.REDIS_PASSWORD.strip()

        self.redis_client = redis.Redis(**connection_params)
        self.enabled = settings.RATE_LIMIT_ENABLED

        # Default global limits
        self.default_limits = {
            "minute": settings.RATE_LIMIT_REQUESTS_PER_MINUTE,
            "hour": settings.RATE_LIMIT_REQUESTS_PER_HOUR,
            "day": settings.RATE_LIMIT_REQUESTS_PER_DAY,
        }

        # Per-endpoint limits, counted one per request
        ai_limits = {"hour": settings.AI_RATE_LIMIT_PER_HOUR}
        self.endpoint_limits: Dict[str, Dict[str, Any]] = {
            f"{settings.API_STR}/auth/login": {"minute": 10, "hour": 100},
            f"{settings.API_STR}/auth/register": {"minute": 5, "hour": 50},
            f"{settings.API_STR}/home/image-search": ai_limits,
            f"{settings.API_STR}/admin/cars/ai-extract": ai_limits,
        }

        self.ip_whitelist = []


    async def __call__(self, request: Request, call_next):
        """
        Main middleware handler entrypoint.

        Args:
            request: Incoming FastAPI request
            call_next: Next middleware or route handler

        Returns:
            Response from next handler or rate-limit error response
        """
        if not self.enabled or request.method == "OPTIONS":
            return await call_next(request)

        client_ip = self.get_client_ip(request)
        endpoint = request.url.path

        if client_ip in self.ip_whitelist or self.should_skip_rate_limit(request):
            return await call_next(request)

        if endpoint in self.endpoint_limits:
            limits = self.endpoint_limits[endpoint]
            weight = 1
        else:
            limits = self.default_limits
            weight = METHOD_WEIGHTS.get(request.method, 1)

        is_blocked, retry_after = await self.check_rate_limits(
            client_ip, endpoint, limits, weight
        )
        if is_blocked:
            return self.rate_limit_response(retry_after)

        response = await call_next(request)
        await self.add_rate_limit_headers(response, client_ip, endpoint, limits)
        return response


    def rate_limit_response(self, retry_after: int) -> JSONResponse:
        """
        Return standardized 429 rate-limit response.

        Args:
            retry_after: Seconds until client can retry

        Returns:
            JSONResponse with 429 status and retry info
        """
        return JSONResponse(
            status_code=429,
            content={
                "detail": f"Rate limit exceeded. Try again in {retry_after} seconds.",
                "retry_after": retry_after,
            },
            headers={"Retry-After": str(retry_after)},
        )


    def _key(self, client_ip: str, endpoint: str, period: str) -> str:
        return f"rate_limit:{client_ip}:{endpoint}:{period}"


    async def check_rate_limits(
        self, client_ip: str, endpoint: str, limits: Dict[str, Any], weight: int
    ) -> Tuple[bool, int]:
        """
        Check whether request exceeds any configured time window.

        Redis failures let the request through.

        Args:
            client_ip: IP address of the client
            endpoint: Requested API endpoint
            limits: Rate limit configuration per time window
            weight: Cost of this request

        Returns:
            Tuple indicating if blocked and retry-after seconds
        """
        try:
            for period, limit in limits.items():
                window = TIME_WINDOWS.get(period, 60)
                key = self._key(client_ip, endpoint, period)

                current_count = await self.increment_counter(key, window, weight)
                if current_count > limit:
                    ttl = await self.redis_client.ttl(key)
                    retry_after = ttl if ttl > 0 else window
                    logger.warning(
                        f"Rate limit exceeded for {client_ip} on {endpoint} "
                        f"({period}: {current_count}/{limit}), retry in {retry_after}s"
                    )
                    return True, retry_after

            return False, 0

        except Exception as e:
            logger.error(f"Redis rate limit check error: {e}")
            return False, 0


    async def increment_counter(self, key: str, window: int, weight: int = 1) -> int:
        """
        Increment request counter, starting the window on first use.

        Args:
            key: Redis key for the rate limit counter
            window: Time window in seconds
            weight: Amount to add

        Returns:
            Current count after increment
        """
        pipeline = self.redis_client.pipeline()
        pipeline.incrby(key, weight)
        pipeline.ttl(key)
        count, ttl = await pipeline.execute()
        if ttl < 0:
            await self.redis_client.expire(key, window)
        return count


    async def add_rate_limit_headers(
        self, response, client_ip: str, endpoint: str, limits: Dict[str, Any]
    ):
        """
        Attach rate-limit information headers to response.

        Args:
            response: FastAPI response object
            client_ip: IP address of the client
            endpoint: Requested API endpoint
            limits: Rate limit configuration per time window

        Returns:
            None
        """
        try:
            for period, limit in limits.items():
                key = self._key(client_ip, endpoint, period)
                current_count = int(await self.redis_client.get(key) or 0)
                ttl = await self.redis_client.ttl(key)

                response.headers[f"X-RateLimit-Limit-{period.capitalize()}"] = str(
                    limit
                )
                response.headers[f"X-RateLimit-Remaining-{period.capitalize()}"] = str(
                    max(0, limit - current_count)
                )
                response.headers[f"X-RateLimit-Reset-{period.capitalize()}"] = str(ttl)

        except Exception as e:
            logger.warning(f"Rate limit header update error: {e}")


    def get_client_ip(self, request: Request) -> str:
        """
        Extract client IP considering proxy headers.

        Args:
            request: Incoming FastAPI request

        Returns:
            Client IP address as string
        """
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"


    def should_skip_rate_limit(self, request: Request) -> bool:
        skip_paths = ["/docs", "/redoc", "/openapi.json", "/favicon.ico", "/health"]
        return request.url.path in skip_paths


    async def ping(self) -> bool:
        try:
            return await self.redis_client.ping()
        except Exception as e:
            logger.warning(f"Redis not reachable, rate limiting will fail open: {e}")
            return False


    async def close(self) -> None:
        await self.redis_client.aclose()


rate_limit_middleware = RateLimitMiddleware()
