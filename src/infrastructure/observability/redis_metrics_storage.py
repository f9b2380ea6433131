"""
Redis-backed metrics storage.

Request and business counters are kept in Redis so the numbers reported by
/api/v1/metrics are aggregated across every Gunicorn worker.

Only metrics go to Redis. Verification codes never leave process memory.
"""

import logging
import time

import redis.asyncio as aioredis
from config.settings import settings

logger = logging.getLogger(__name__)

BUSINESS_METRICS = ("codes_sent", "codes_verified")

REQUEST_COUNTS_KEY = "metrics:request_counts"
STATUS_COUNTS_KEY = "metrics:status_counts"
ERROR_COUNT_KEY = "metrics:error_count"
BUSINESS_KEY = "metrics:business"
LATENCY_KEY_PREFIX = "metrics:latencies:"


def _empty_snapshot() -> dict:
    return {
        "request_counts": {},
        "status_counts": {},
        "error_count": 0,
        "business_metrics": {name: 0 for name in BUSINESS_METRICS},
        "latencies": {},
    }


class RedisMetricsStorage:
    """
    Metrics storage on Redis data structures.

    - HASH for counters (requests per endpoint, status codes, business metrics)
    - ZSET per endpoint for latency samples, scored by timestamp

    Every write swallows and logs Redis errors: losing a metric sample must
    never fail the request being measured.
    """

    def __init__(
        self,
        redis_client: aioredis.Redis | None = None,
        metrics_ttl_seconds: int = 3600,
        latency_window_size: int = 1000,
    ):
        """
        Initialize Redis metrics storage.

        Args:
            redis_client: Optional Redis client (injected for testing)
            metrics_ttl_seconds: Keys expire after this long without writes
            latency_window_size: Latency samples kept per endpoint
        """
        self._redis: aioredis.Redis | None = redis_client
        self._metrics_ttl = metrics_ttl_seconds
        self._latency_window_size = latency_window_size

    async def _get_redis(self) -> aioredis.Redis:
        """Get or create Redis connection."""
        if self._redis is None:
            self._redis = aioredis.from_url(
                f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}",
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    async def record_request(self, endpoint: str, status_code: int, duration_ms: float) -> None:
        """
        Record one completed request.

        Args:
            endpoint: The endpoint (e.g., "POST /api/v1/verification/send")
            status_code: HTTP status code returned
            duration_ms: Request duration in milliseconds
        """
        try:
            redis = await self._get_redis()
            now = time.time()
            latency_key = f"{LATENCY_KEY_PREFIX}{endpoint}"

            pipe = redis.pipeline()
            pipe.hincrby(REQUEST_COUNTS_KEY, endpoint, 1)
            pipe.hincrby(STATUS_COUNTS_KEY, str(status_code), 1)
            if status_code >= 400:
                pipe.incr(ERROR_COUNT_KEY)
            pipe.zadd(latency_key, {f"{now}:{duration_ms}": now})
            # Keep only the most recent samples
            pipe.zremrangebyrank(latency_key, 0, -self._latency_window_size - 1)
            for key in (REQUEST_COUNTS_KEY, STATUS_COUNTS_KEY, ERROR_COUNT_KEY, latency_key):
                pipe.expire(key, self._metrics_ttl)
            await pipe.execute()
        except Exception as e:
            logger.error(f"Failed to record request metrics for {endpoint}: {e}")

    async def increment_business_metric(self, metric_name: str) -> None:
        """
        Increment a business metric counter.

        Args:
            metric_name: One of BUSINESS_METRICS
        """
        try:
            redis = await self._get_redis()
            await redis.hincrby(BUSINESS_KEY, metric_name, 1)
            await redis.expire(BUSINESS_KEY, self._metrics_ttl)
        except Exception as e:
            logger.error(f"Failed to increment business metric {metric_name}: {e}")

    async def get_metrics(self) -> dict:
        """
        Get aggregated metrics from Redis.

        Returns:
            Dictionary containing all metrics (zeros if Redis is unreachable)
        """
        try:
            redis = await self._get_redis()

            request_counts = await redis.hgetall(REQUEST_COUNTS_KEY) or {}
            status_counts = await redis.hgetall(STATUS_COUNTS_KEY) or {}
            error_count = await redis.get(ERROR_COUNT_KEY)
            business_raw = await redis.hgetall(BUSINESS_KEY) or {}

            latencies = {}
            for key in await redis.keys(f"{LATENCY_KEY_PREFIX}*"):
                durations = self._parse_samples(await redis.zrange(key, 0, -1))
                if durations:
                    latencies[key.removeprefix(LATENCY_KEY_PREFIX)] = self._summarize(durations)

            return {
                "request_counts": {k: int(v) for k, v in request_counts.items()},
                "status_counts": {int(k): int(v) for k, v in status_counts.items()},
                "error_count": int(error_count) if error_count else 0,
                "business_metrics": {
                    name: int(business_raw.get(name, 0)) for name in BUSINESS_METRICS
                },
                "latencies": latencies,
            }

        except Exception as e:
            logger.error(f"Failed to get metrics: {e}")
            return _empty_snapshot()

    @staticmethod
    def _parse_samples(samples: list[str]) -> list[float]:
        """Extract durations from "timestamp:duration" members, skipping junk."""
        durations = []
        for sample in samples:
            try:
                _, duration_str = sample.split(":", 1)
                durations.append(float(duration_str))
            except ValueError:
                continue
        return durations

    @classmethod
    def _summarize(cls, durations: list[float]) -> dict:
        ordered = sorted(durations)
        return {
            "count": len(ordered),
            "p50": cls._percentile(ordered, 50),
            "p95": cls._percentile(ordered, 95),
            "p99": cls._percentile(ordered, 99),
            "min": round(ordered[0], 2),
            "max": round(ordered[-1], 2),
        }

    @staticmethod
    def _percentile(sorted_values: list[float], percentile: int) -> float:
        """
        Calculate percentile from sorted values with linear interpolation.

        Args:
            sorted_values: List of values sorted in ascending order
            percentile: Percentile to calculate (0-100)

        Returns:
            The value at the specified percentile
        """
        if not sorted_values:
            return 0.0

        k = (len(sorted_values) - 1) * percentile / 100
        f = int(k)
        c = f + 1

        if c >= len(sorted_values):
            return round(sorted_values[-1], 2)

        return round(sorted_values[f] * (c - k) + sorted_values[c] * (k - f), 2)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
