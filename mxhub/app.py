import logging
import time
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Config
from .core.middleware import ALLOWED_METHODS, global_exception_handler, log_requests
from .routes import auth, checklists, lap_times, notes, suspension, tracks, workouts
from .services.supabase_service import get_client

logger = logging.getLogger(__name__)

SERVICE_NAME = "mxhub-api"
VERSION = "1.0"

FEATURES = [
    {
        "title": "Riding Checklist",
        "description": "Track your pre-ride checks and moto maintenance",
        "path": "/checklists",
    },
    {
        "title": "Lap Times",
        "description": "Record and analyze your lap times",
        "path": "/lap-times",
    },
    {
        "title": "Tracks",
        "description": "Manage your favorite tracks and conditions",
        "path": "/tracks",
    },
    {
        "title": "Workouts",
        "description": "Plan and track your training sessions",
        "path": "/workouts",
    },
    {
        "title": "Suspension",
        "description": "Track suspension settings and changes",
        "path": "/suspension",
    },
    {
        "title": "Notes",
        "description": "Keep track of riding tips and improvements",
        "path": "/notes",
    },
]

# Initialize FastAPI
app = FastAPI(title="MX Hub API", version=VERSION)

# CORS setup
ALLOWED_ORIGINS = Config.allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=ALLOWED_METHODS,
    allow_headers=["*"],
)

@app.middleware("http")
async def _log_requests(request, call_next):
    return await log_requests(request, call_next)

@app.exception_handler(Exception)
async def _global_exception_handler(request, exc):
    return await global_exception_handler(request, exc)


for router in (auth.router, checklists.router, lap_times.router, tracks.router, workouts.router, suspension.router, notes.router):
    app.include_router(router)


@app.get("/health")
def health_check():
    """Configuration and Supabase connectivity check."""
    health_start_time = time.time()

    try:
        Config.validate()
        supabase = get_client()
        supabase.table('tracks').select('id').limit(1).execute()

        health_duration = time.time() - health_start_time

        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "timestamp": datetime.now().isoformat(),
            "response_time_ms": round(health_duration * 1000, 2)
        }
    except Exception as e:
        health_duration = time.time() - health_start_time
        logger.error(f"Health check failed: {str(e)} - Duration: {health_duration:.1f}s")

        return {
            "status": "unhealthy",
            "service": SERVICE_NAME,
            "timestamp": datetime.now().isoformat(),
            "error": str(e),
            "response_time_ms": round(health_duration * 1000, 2)
        }


@app.get("/")
async def root():
    """Return basic API information and the feature directory."""

    return {
        "service": "MX Hub API",
        "version": VERSION,
        "features": FEATURES,
        "endpoints": {
            "auth": "/auth",
            "health": "/health",
        },
        "timestamp": datetime.now().isoformat(),
        "description": "Motocross companion: checklists, lap timing, tracks, workouts, suspension and notes",
    }
