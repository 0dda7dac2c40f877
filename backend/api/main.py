import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routers import inventory_router, purchasing_router
from backend.core.config import settings
from backend.core.inventory import get_inventory_service

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    # Fail fast on a bad config file rather than on the first request
    service = get_inventory_service()
    logger.info("Depot API ready (fuzzy threshold %.2f)", service.settings.fuzzy_threshold)

    yield  # Application runs here


app = FastAPI(title="Depot Inventory", version=VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(inventory_router)
app.include_router(purchasing_router)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "version": VERSION}
