from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import creator_proposals_settings as settings
from src.creator_proposals.client_resolver import close_plugin_clients
from src.creator_proposals.router import router as creator_proposals_router
from src.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creator Proposals service starting up...")
    yield
    await close_plugin_clients()
    logger.info("Plugin clients closed")


app = FastAPI(title="Creator Proposals Service", version="0.1.0", lifespan=lifespan)

# Parse allowed origins - credentials only when origins are explicit
allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]
logger.info(f"Allowed origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials="*" not in allowed_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(creator_proposals_router, prefix="/creator-proposals", tags=["creator-proposals"])


@app.get("/healthz")
def healthz() -> dict:
    """Basic health check."""
    return {"status": "ok"}
