"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from code_translator import __version__
from code_translator.config import settings
from code_translator.api.routes import translate
from code_translator.core.translation import CURRENT_PROTOCOL
from code_translator.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging(settings.effective_log_level, settings.log_file)
    logger.info(
        "Starting %s: model=%s/%s, protocol=v%s",
        settings.app_name,
        settings.llm_provider,
        settings.llm_model,
        CURRENT_PROTOCOL.version,
    )
    yield


app = FastAPI(
    title=settings.app_name,
    description="Idiomatic source code translation backed by an LLM",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include routers
app.include_router(translate.router, prefix="/api", tags=["translate"])


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Render anything that escaped a route as a generic error."""
    logger.error("Unhandled error on %s: %s", request.url.path, type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Code Translator API", "version": __version__}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
