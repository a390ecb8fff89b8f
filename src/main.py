"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api import auth, dashboard
from src.api.errors import register_exception_handlers
from src.config import Settings, get_settings
from src.database import Database
from src.services.auth import TokenService, build_password_context

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def configure_logging(level: str) -> None:
    """Set up root logging for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and wire its collaborators."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database handle on startup and release it on shutdown."""
        db = Database(settings.database_url)
        db.create_all()
        app.state.db = db
        logger.info(f"Dashboard API started ({settings.environment})")
        yield
        db.dispose()

    app = FastAPI(
        title="Widget Dashboard API",
        description="Per-user widget dashboards with JWT authentication",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pwd_context = build_password_context(settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        lifetime=timedelta(minutes=settings.jwt_expiration_minutes),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    register_exception_handlers(app, debug=settings.is_development)

    # Register routers
    app.include_router(auth.router)
    app.include_router(dashboard.router)

    @app.get("/")
    async def root():
        """Service banner."""
        return {"success": True, "message": "Dashboard API is running", "version": API_VERSION}

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app


settings = get_settings()
configure_logging(settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)  # noqa: S104
