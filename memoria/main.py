from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from memoria.core.config import settings
from memoria.core.exceptions import MemoriaError
from memoria.middleware.request_logging import RequestLoggingMiddleware
from memoria.middleware.auth_logging import AuthLoggingMiddleware
from memoria.modules.auth.api.router import router as auth_router
from memoria.modules.user_management.api.router import router as user_router
from memoria.modules.relationships.api.router import router as relationships_router
from memoria.modules.friendships.api.router import router as friendships_router
from memoria.modules.notifications.api.router import router as notifications_router
from memoria.modules.realtime.api.router import router as realtime_router
from memoria.db.init_db import create_all_tables

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("memoria")

# Initialize the FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url="/openapi.json",
    exception_handlers={
        RequestValidationError: request_validation_exception_handler,
        HTTPException: http_exception_handler,
    },
    debug=settings.DEBUG,
    description="Friendships, follows, blocks and notifications for the Memoria app",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"defaultModelsExpandDepth": -1},
)

@app.exception_handler(MemoriaError)
async def memoria_error_handler(request: Request, exc: MemoriaError):
    logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting server in {settings.ENVIRONMENT} mode")

    create_all_tables()

# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(AuthLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(auth_router, prefix=f"{settings.API_PREFIX}/auth", tags=["authentication"])
app.include_router(user_router, prefix="/users", tags=["users"])
app.include_router(relationships_router, prefix="/users", tags=["relationships"])
app.include_router(friendships_router, prefix=f"{settings.API_PREFIX}/friendships", tags=["friendships"])
app.include_router(notifications_router, prefix=f"{settings.API_PREFIX}/notifications", tags=["notifications"])
app.include_router(realtime_router, tags=["realtime"])

@app.get("/")
async def root():
    return {
        "message": "Welcome to Memoria",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "documentation": "/docs" if settings.DEBUG else None,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("memoria.main:app", host="0.0.0.0", port=8000, reload=True)
