"""BET Tracker: equipment charging sessions, battery swaps and access control."""
import logging
import os
import subprocess
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from utils.config import CORS_ORIGINS, LOG_LEVEL, PORT

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

from api.charging import router as charging_router
from api.charging_points import router as charging_points_router
from api.equipment import router as equipment_router
from api.errors import register_exception_handlers
from api.locations import router as locations_router
from api.routes import router
from api.swaps import router as swaps_router
from api.users import router as users_router
from db import SessionLocal
from repositories.location_repository import count_locations, create_location as repo_create_location

LOG = logging.getLogger(__name__)

# Airports served at rollout.
DEFAULT_LOCATIONS = [
    ("DEL", "Delhi"),
    ("TRV", "Trivandrum"),
    ("HYD", "Hyderabad"),
    ("BLR", "Bangalore"),
    ("IXE", "Mangalore"),
]

app = FastAPI(
    title="BET Tracker",
    description="Battery-electric ground support equipment charging and swap tracker",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

# API routes under /api
app.include_router(router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(locations_router, prefix="/api")
app.include_router(equipment_router, prefix="/api")
app.include_router(charging_points_router, prefix="/api")
app.include_router(charging_router, prefix="/api")
app.include_router(swaps_router, prefix="/api")


@app.on_event("startup")
def startup() -> None:
    """Run DB migrations and seed default locations."""
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")
    _seed_locations_if_empty()


def _seed_locations_if_empty() -> None:
    """Seed the rollout airports on a fresh database."""
    db = SessionLocal()
    try:
        if count_locations(db) > 0:
            return
        for code, name in DEFAULT_LOCATIONS:
            repo_create_location(db, code, name)
        LOG.info("Seeded %d default locations", len(DEFAULT_LOCATIONS))
    finally:
        db.close()


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "bet-tracker", "docs": "/docs", "health": "/api/health"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=PORT)
