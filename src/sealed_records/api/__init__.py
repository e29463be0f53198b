# Sealed Records - Web API
#
# FastAPI backend serving the sealed records envelope.

from .main import create_app, start_api_server
from .records_routes import router as records_router

__all__ = [
    "create_app",
    "start_api_server",
    "records_router",
]
