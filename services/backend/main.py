"""
Gatekeeper Access API
FastAPI + SQLModel - visitor invites, gate scans and device sessions
"""
from dotenv import load_dotenv
load_dotenv()  # Load .env before any other imports

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_error_handlers
from api.v1 import devices, invites, notifications, scan, sessions
from config import get_settings
from infrastructure.container import build_access_core
from infrastructure.database import dispose_engine, get_session_maker, init_db

# Setup structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ]
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    settings = get_settings()
    await init_db()

    core = build_access_core(settings, get_session_maker())
    app.state.access_core = core
    if settings.enable_schedulers:
        core.start_schedulers()

    logger.info("backend_started", app_name=settings.app_name)

    yield

    await core.stop_schedulers()
    await dispose_engine()
    logger.info("backend_shutdown")


app = FastAPI(
    title="Gatekeeper Access API",
    description="Visitor invites, gate scans and device sessions for gated estates",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        *[f"http://localhost:{port}" for port in range(3000, 3007)],
        *[f"http://127.0.0.1:{port}" for port in range(3000, 3007)],
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(invites.router, prefix="/api/v1/invites", tags=["invites"])
app.include_router(scan.router, prefix="/api/v1/scan", tags=["scan"])
app.include_router(devices.router, prefix="/api/v1/devices", tags=["devices"])
app.include_router(sessions.router, prefix="/api/v1/sessions", tags=["sessions"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["notifications"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "gatekeeper-access-core"}


@app.get("/")
async def root():
    return {"message": "Gatekeeper Access API", "docs": "/docs"}
