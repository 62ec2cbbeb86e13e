import os
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.cache import CacheClient
from shared.config import settings
from shared.config.database import Base, engine
from shared.observability import setup_observability
from shared.realtime import Notifier
from shared.realtime.router import router as notifications_router
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.auth_service import models as user_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401
from services.subscription_service import models as subscription_models  # noqa: F401
from services.contact_service import models as contact_models  # noqa: F401

from services.auth_service.router import router as auth_router
from services.order_service.router import router as order_router
from services.subscription_service.router import router as subscription_router
from services.contact_service.router import router as contact_router
from services.cache_service.router import router as cache_router
from services.fitness_service.router import router as fitness_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The primary store is required: fail fast if it is unreachable
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        logger.critical("database_unavailable", error=str(e))
        raise
    logger.info("database_connected")

    # The cache is optional: failure only disables it
    cache = CacheClient.from_url(settings.REDIS_URL)
    await cache.connect()
    app.state.cache = cache
    app.state.notifier = Notifier()

    yield

    await app.state.notifier.close()
    await app.state.cache.close()
    await engine.dispose()


def _validation_message(error: dict) -> str:
    msg = error.get("msg", "Invalid value")
    return msg[len("Value error, "):] if msg.startswith("Value error, ") else msg


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request-shape errors are client errors (400) with one entry per field."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": _validation_message(err),
        }
        for err in exc.errors()
    ]
    message = errors[0]["message"] if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", path=request.url.path, method=request.method, exc_info=exc)
    content = {"message": "Server error"}
    if not settings.IS_PRODUCTION:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app() -> FastAPI:
    app = FastAPI(
        title="EnerGise Backend",
        version="1.0.0",
        description="Orders, subscriptions, contact messages and fitness calculators.",
        lifespan=lifespan,
    )

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, settings.APP_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router)
    app.include_router(order_router)
    app.include_router(subscription_router)
    app.include_router(contact_router)
    app.include_router(cache_router)
    app.include_router(fitness_router)
    app.include_router(notifications_router)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "Backend is running"

    if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
        app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
