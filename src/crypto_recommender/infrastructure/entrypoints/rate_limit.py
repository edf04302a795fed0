"""
Per-client admission control using a token bucket per client IP.

Each bucket holds ``capacity`` tokens and is refilled to capacity once every
``refill_seconds`` (interval refill, not a smooth trickle). A request that finds
its bucket empty gets 429 with a ``Retry-After`` header.

The buckets live in process memory, so limits are per worker process. Buckets
that sit idle for a whole interval are evicted.
"""

import math
import time
from dataclasses import dataclass
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger(__name__)


@dataclass
class TokenBucket:
    capacity: int
    refill_seconds: float
    tokens: int
    last_refill: float

    def _refill(self, now: float) -> None:
        elapsed = now - self.last_refill
        if elapsed >= self.refill_seconds:
            intervals = int(elapsed // self.refill_seconds)
            self.tokens = min(self.capacity, self.tokens + intervals * self.capacity)
            self.last_refill += intervals * self.refill_seconds

    def try_consume(self, now: float) -> bool:
        self._refill(now)
        if self.tokens > 0:
            self.tokens -= 1
            return True
        return False

    def seconds_until_refill(self, now: float) -> int:
        return max(1, math.ceil(self.refill_seconds - (now - self.last_refill)))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Token-bucket per-IP rate limiter.

    Parameters
    ----------
    app:
        The ASGI application to wrap.
    enabled:
        Master switch. When ``False`` all requests pass through.
    capacity:
        Requests allowed per client per refill interval.
    refill_seconds:
        Length of the refill interval.
    exempt_paths:
        Paths that are never limited (health checks).
    trust_forwarded_for:
        Key clients by the first X-Forwarded-For hop. Enable only behind a
        proxy that overwrites the header; otherwise clients can spoof it.
    clock:
        Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        app: object,
        enabled: bool = True,
        capacity: int = 100,
        refill_seconds: float = 60.0,
        exempt_paths: tuple[str, ...] = ("/health",),
        trust_forwarded_for: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._enabled = enabled
        self._capacity = capacity
        self._refill_seconds = refill_seconds
        self._exempt_paths = exempt_paths
        self._trust_forwarded_for = trust_forwarded_for
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self._last_prune = clock()

    @property
    def tracked_clients(self) -> int:
        return len(self._buckets)

    def _client_ip(self, request: Request) -> str:
        """Peer address, or the first X-Forwarded-For hop when the proxy is trusted."""
        if self._trust_forwarded_for:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _prune(self, now: float) -> None:
        """Drop buckets idle for a full interval; they would refill to capacity anyway."""
        if now - self._last_prune < self._refill_seconds:
            return
        self._last_prune = now
        idle = [ip for ip, b in self._buckets.items() if now - b.last_refill >= self._refill_seconds]
        for ip in idle:
            del self._buckets[ip]
        if idle:
            logger.debug("rate_limit_buckets_pruned", evicted=len(idle), remaining=len(self._buckets))

    def _bucket_for(self, ip: str, now: float) -> TokenBucket:
        self._prune(now)
        bucket = self._buckets.get(ip)
        if bucket is None:
            bucket = TokenBucket(
                capacity=self._capacity,
                refill_seconds=self._refill_seconds,
                tokens=self._capacity,
                last_refill=now,
            )
            self._buckets[ip] = bucket
        return bucket

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or request.url.path in self._exempt_paths:
            return await call_next(request)

        ip = self._client_ip(request)
        now = self._clock()
        bucket = self._bucket_for(ip, now)

        if not bucket.try_consume(now):
            retry_after = bucket.seconds_until_refill(now)
            logger.warning("rate_limit_exceeded", client=ip, path=request.url.path, retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests"},
                headers={"Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._capacity)
        response.headers["X-RateLimit-Remaining"] = str(bucket.tokens)
        return response
