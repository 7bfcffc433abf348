"""
Middleware throttling API requests per client address
"""
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.error_handling import RateLimitException, error_response
from app.core.rate_limit import RateLimiter, rate_limiter

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject requests under `path_prefix` with 429 once a client exceeds its window.
    CORS preflight requests are not counted.
    """

    def __init__(self, app, path_prefix: str = "", limiter: RateLimiter = rate_limiter):
        super().__init__(app)
        self.path_prefix = path_prefix
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_host = request.client.host if request.client else "unknown"
        retry_after = await self.limiter.hit(client_host)
        if retry_after is not None:
            logger.warning(f"Rate limit exceeded for {client_host} on {request.method} {request.url.path}")
            return error_response(RateLimitException(retry_after=retry_after))

        return await call_next(request)
