from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings, parse_comma_separated_origins
from app.core.error_handlers import register_exception_handlers
from app.core.telemetry import setup_telemetry
from app.database.database import create_db_and_tables
from app.internal import admin
from app.routers import assignment, candidature, partner, project, volunteer
from app.services.deadline_monitor import DeadlineMonitorRegistry
from app.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup and shutdown of the application.

    On startup: logging, tables, telemetry and the deadline monitor registry
    (one monitor per admin session, owned by this app). On shutdown every
    running monitor is stopped.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, serialize=settings.ENVIRONMENT == "production")
    create_db_and_tables()
    setup_telemetry(app)
    app.state.deadline_monitors = DeadlineMonitorRegistry()
    yield
    await app.state.deadline_monitors.stop_all()


app = FastAPI(
    title="Deployment Engine API",
    description="Project lifecycle and volunteer assignment for partner organizations",
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
    """Liveness check for the load balancer."""
    return {"status": "ok"}


app.include_router(project.router)
app.include_router(candidature.router)
app.include_router(partner.router)
app.include_router(volunteer.router)
app.include_router(assignment.router)
app.include_router(admin.router)
