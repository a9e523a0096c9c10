import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import COMMAND_EXECUTION_DELAY_SECONDS, CORS_ORIGINS, LOG_LEVEL
from database import SessionLocal, init_db
from exception_handlers import register_exception_handlers
from routers import auth, commands, devices, health, settings, telemetry
from routers.commands import limiter
from services.command_dispatcher import SimulatedCommandDispatcher


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup: Initialize the database and the command delivery channel
    init_db()
    app.state.command_dispatcher = SimulatedCommandDispatcher(
        SessionLocal,
        delay_seconds=COMMAND_EXECUTION_DELAY_SECONDS,
    )
    yield
    # Shutdown: pending command timers are daemon threads and die with the process


app = FastAPI(
    title="DeviceWatch API",
    description="Backend API for the DeviceWatch device monitoring dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure rate limiter
app.state.limiter = limiter
register_exception_handlers(app)

# The dashboard authenticates with a session cookie, so credentials must be allowed
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(devices.router, prefix="/api/devices", tags=["devices"])
app.include_router(telemetry.router, prefix="/api/devices", tags=["telemetry"])
app.include_router(commands.router, prefix="/api", tags=["commands"])
app.include_router(settings.router, prefix="/api/settings", tags=["settings"])


@app.get("/")
async def root():
    return {"message": "Welcome to DeviceWatch API"}
