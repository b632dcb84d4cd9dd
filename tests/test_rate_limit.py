from app.core.config import settings
from app.middlewares.rate_limit_middleware import RateLimitMiddleware


class FakePipeline:
    def __init__(self, redis):
        self.redis = redis
        self.ops = []

    def incrby(self, key, amount):
        self.ops.append(("incrby", key, amount))

    def ttl(self, key):
        self.ops.append(("ttl", key))

    async def execute(self):
        results = []
        for op in self.ops:
            if op[0] == "incrby":
                results.append(await self.redis.incrby(op[1], op[2]))
            else:
                results.append(await self.redis.ttl(op[1]))
        return results


class FakeRedis:
    """In-memory stand-in for the few redis commands the limiter uses."""

    def __init__(self, fail: bool = False):
        self.counts = {}
        self.expiry = {}
        self.fail = fail

    def pipeline(self):
        if self.fail:
            raise ConnectionError("redis down")
        return FakePipeline(self)

    async def incrby(self, key, amount):
        self.counts[key] = self.counts.get(key, 0) + amount
        return self.counts[key]

    async def ttl(self, key):
        return self.expiry.get(key, -1)

    async def expire(self, key, seconds):
        self.expiry[key] = seconds

    async def get(self, key):
        return self.counts.get(key)


def make_limiter(redis) -> RateLimitMiddleware:
    limiter = RateLimitMiddleware()
    limiter.redis_client = redis
    return limiter


async def test_ai_endpoint_blocks_after_hourly_quota():
    limiter = make_limiter(FakeRedis())
    endpoint = f"{settings.API_STR}/home/image-search"
    limits = limiter.endpoint_limits[endpoint]

    results = [
        await limiter.check_rate_limits("10.0.0.1", endpoint, limits, 1)
        for _ in range(settings.AI_RATE_LIMIT_PER_HOUR + 1)
    ]

    assert all(blocked is False for blocked, _ in results[:-1])
    assert results[-1] == (True, 3600)


async def test_window_expiry_is_set_once():
    redis = FakeRedis()
    limiter = make_limiter(redis)

    await limiter.increment_counter("key", 60)
    redis.expiry["key"] = 42
    count = await limiter.increment_counter("key", 60, weight=2)

    assert count == 3
    assert redis.expiry["key"] == 42


async def test_redis_failure_lets_requests_through():
    limiter = make_limiter(FakeRedis(fail=True))

    blocked, retry_after = await limiter.check_rate_limits(
        "10.0.0.1", "/api/cars", limiter.default_limits, 1
    )

    assert (blocked, retry_after) == (False, 0)


def test_rate_limit_response():
    limiter = make_limiter(FakeRedis())

    response = limiter.rate_limit_response(30)

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "30"
