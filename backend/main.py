# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import (
    CORS_ORIGINS, LOG_LEVEL,
    JWT_SECRET, DEFAULT_JWT_SECRET,
    NOTIFICATIONS_ENABLED, NOTIFICATION_INTERVAL_SECONDS,
    PRODUCER_REJECTION_POLICY, ORDER_TRANSITION_POLICY,
)
from database.session import SessionLocal
from gateway.gateway_router import gateway_router
from routers.realtime_router import router as realtime_router
from services.approval_service import REJECTION_POLICIES
from services.broadcaster import Broadcaster
from services.notification_scheduler import NotificationScheduler
from services.order_status import TRANSITION_POLICIES

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def _check_settings():
    if PRODUCER_REJECTION_POLICY not in REJECTION_POLICIES:
        raise ValueError(f"PRODUCER_REJECTION_POLICY must be one of {REJECTION_POLICIES}")
    if ORDER_TRANSITION_POLICY not in TRANSITION_POLICIES:
        raise ValueError(f"ORDER_TRANSITION_POLICY must be one of {tuple(TRANSITION_POLICIES)}")
    if JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; admin tokens are signed with the built-in default key")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Harvest Hub API is starting")

    try:
        with app.state.session_factory() as db:
            db.execute(text("SELECT 1"))
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    scheduler = None
    if NOTIFICATIONS_ENABLED:
        scheduler = NotificationScheduler(
            app.state.broadcaster,
            app.state.session_factory,
            interval_seconds=NOTIFICATION_INTERVAL_SECONDS,
        )
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        await scheduler.shutdown()
    logger.info("Shutting down")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"errors": errors})


def create_app(session_factory=SessionLocal) -> FastAPI:
    _check_settings()

    app = FastAPI(
        title="Harvest Hub API",
        description="Marketplace admin API with real-time notifications",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.broadcaster = Broadcaster()
    app.state.session_factory = session_factory
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.get("/health")
    def health():
        status = {"status": "healthy", "service": "harvest-hub-api", "version": APP_VERSION}
        try:
            with app.state.session_factory() as db:
                db.execute(text("SELECT 1"))
            status["database"] = "connected"
        except Exception as e:
            status["database"] = f"error: {e.__class__.__name__}"
            status["status"] = "degraded"
        return status

    app.include_router(gateway_router, prefix="/api")
    app.include_router(realtime_router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=LOG_LEVEL.lower(),
    )
