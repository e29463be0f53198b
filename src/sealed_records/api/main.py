# Sealed Records - FastAPI Backend
#
# Serves the sealed records envelope. CORS origins come from settings;
# only GET/POST/OPTIONS are allowed.

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from .. import __version__
from ..config import Settings, get_settings
from ..core import configure_audit_logger
from .records_routes import router as records_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app with CORS and the records router."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Sealed Records API",
        description="Authenticated-encryption transport for sensitive records",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(records_router)

    app.state.settings = settings
    app.state.audit_logger = configure_audit_logger(settings.audit_log_dir)

    if not settings.encryption_key:
        logger.warning("ENCRYPTION_KEY is not set; /api/encrypted-data will return 500")

    return app


def start_api_server(host: str = "127.0.0.1", port: int = 8000, settings: Optional[Settings] = None):
    """
    Start FastAPI server.

    Args:
        host: Host to bind to (default: localhost only)
        port: Port to listen on
        settings: Settings to build the app with (default: from environment)
    """
    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")
