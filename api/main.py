"""
Document Formatter API

Run with:
    uvicorn api.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.logging_config import get_logger
from core.formatting import __version__
from core.pipeline.performance import PerformanceMonitor

from .formatter_models import HealthResponse
from .formatter_router import router as formatter_router

logger = get_logger(__name__)

# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Document Formatter API",
    description="Structure-aware formatting of plain and Markdown documents",
    version=__version__,
)

# CORS for local UIs
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(formatter_router)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Service liveness and memory usage."""
    return HealthResponse(
        status="ok",
        version=__version__,
        memory_mb=round(PerformanceMonitor.memory_mb(), 1),
    )
