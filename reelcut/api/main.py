"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reelcut.api.routes import exports, files, sessions
from reelcut.api.websockets import progress
from reelcut.mongodb.client import get_mongodb_client
from reelcut.mongodb.config import mongodb_configured
from reelcut.pipeline.providers import export_service

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Report the transcoder on startup. On shutdown stop running exports and close MongoDB."""
    service = export_service()
    if service.transcoder.available():
        logger.info("Transcoder available")
    elif service.config.allow_mock_export:
        logger.warning("FFmpeg not found; exports will complete as mock exports")
    else:
        logger.warning("FFmpeg not found; exports are disabled")

    yield

    await service.shutdown()
    if mongodb_configured():
        await get_mongodb_client().close()


app = FastAPI(
    title="Reelcut API",
    description="Timeline editing and video export API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
app.include_router(exports.router, prefix="/api/exports", tags=["exports"])
app.include_router(files.router, prefix="/api/files", tags=["files"])
app.include_router(progress.router, prefix="/ws", tags=["websocket"])


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint, including MongoDB reachability when it is configured."""
    if not mongodb_configured():
        return {"status": "healthy", "mongodb": "disabled"}
    if await get_mongodb_client().ping():
        return {"status": "healthy", "mongodb": "connected"}
    return {"status": "degraded", "mongodb": "unreachable"}
