import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "truetravel.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.routers import destinations, notifications, planner, trips

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        from app.database import create_tables
        await create_tables()
        logger.info("Database tables ready")
    except Exception as e:
        logger.warning(f"Table creation failed (trip saving unavailable): {e}")
    yield
    # Shutdown
    from app.services.accommodation_service import accommodation_service
    from app.services.aggregation_coordinator import aggregation_coordinator
    from app.services.cache_service import cache_service

    await aggregation_coordinator.close()
    await accommodation_service.close()
    await cache_service.close()
    logger.info("Outbound clients closed")


app = FastAPI(
    title="True Travel",
    description="Destination discovery and trip planning assistant",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(destinations.router, prefix="/api/destinations", tags=["destinations"])
app.include_router(planner.router, prefix="/api/planner", tags=["planner"])
app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "truetravel"}
