import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, DATABASE_URL, DB_ECHO, LOG_LEVEL, SERVICE_NAME
from .db import Database
from .errors import install_error_handlers
from .middleware import RequestLoggingMiddleware
from .routes import router

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "System", "description": "Operational endpoints (health)."},
    {"name": "Auth", "description": "Registration, login and token checks."},
    {"name": "Bookings", "description": "Customer and provider booking operations."},
]


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(database_url: str = DATABASE_URL) -> FastAPI:
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(database_url, echo=DB_ECHO)
        await db.connect()
        app.state.db = db
        logger.info("[%s] started", SERVICE_NAME)
        try:
            yield
        finally:
            await db.dispose()
            logger.info("[%s] stopped", SERVICE_NAME)

    app = FastAPI(title="Service Sphere Booking Service", openapi_tags=OPENAPI_TAGS, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    install_error_handlers(app)
    app.include_router(router)

    return app


app = create_app()
