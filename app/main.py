from functools import partial
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import get_settings, parse_comma_separated_origins
from app.core.error_handlers import register_exception_handlers
from app.core.telemetry import setup_telemetry
from app.database.database import create_db_and_tables, engine
from app.internal import admin
from app.jobs.scheduler import CouponUsageResetScheduler
from app.routers import dashboard
from app.services.coupon_usage import run_coupon_usage_reset
from app.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Run application startup and shutdown around the serving period.

    On startup: configures logging, creates the database tables, initializes telemetry and
    builds the coupon usage reset scheduler, starting it when `COUPON_RESET_ENABLED` is set.
    The scheduler is kept on `app.state.reset_scheduler`. On shutdown the scheduler is stopped.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    create_db_and_tables()
    setup_telemetry(app, engine)

    scheduler = CouponUsageResetScheduler(
        partial(run_coupon_usage_reset, engine),
        timezone=settings.COUPON_RESET_TIMEZONE,
    )
    app.state.reset_scheduler = scheduler
    if settings.COUPON_RESET_ENABLED:
        scheduler.start()
    try:
        yield
    finally:
        scheduler.stop()


app = FastAPI(
    title="Dealboard Analytics API",
    description="Admin dashboard statistics and coupon usage maintenance for the deals platform",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        str(origin)
        for origin in parse_comma_separated_origins(get_settings().BACKEND_CORS_ORIGINS)
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health", include_in_schema=False)
def health_check():
    """
    Provide the application's liveness state for health checks.

    Returns:
        dict: A mapping with key "status" and value "ok" indicating the service is healthy.
    """
    return {"status": "ok"}


app.include_router(dashboard.router)
app.include_router(admin.router)
