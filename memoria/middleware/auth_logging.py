from fastapi import Request
import logging
from starlette.middleware.base import BaseHTTPMiddleware

from memoria.core.config import settings

logger = logging.getLogger("memoria")

PUBLIC_PATHS = (
    f"{settings.API_PREFIX}/auth/register",
    f"{settings.API_PREFIX}/auth/verify-email",
    f"{settings.API_PREFIX}/auth/login",
    "/docs",
    "/redoc",
    "/openapi.json",
)

class AuthLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        auth_header = request.headers.get("Authorization")
        path = request.url.path

        if not auth_header and path != "/" and not path.startswith(PUBLIC_PATHS):
            logger.warning(f"Protected endpoint {request.method} {path} accessed without auth header")

        response = await call_next(request)

        # Log auth-related status codes
        if response.status_code in [401, 403]:
            logger.warning(f"Auth error: {response.status_code} on {request.method} {path}")

        return response
