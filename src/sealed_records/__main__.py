# Main Entry Point - Sealed Records API server
#
# Runs the FastAPI backend with uvicorn. The passphrase comes from
# ENCRYPTION_KEY (environment or .env), never from the command line.

import argparse
import logging
import sys

from . import __version__
from .config import get_settings
from .core import EventSeverity, EventType, configure_audit_logger


def main():
    """Main entry point for Sealed Records."""
    parser = argparse.ArgumentParser(
        description="Sealed Records - authenticated-encryption transport for sensitive records",
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Backend host (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Backend port (default: 8000)"
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Application log level (default: INFO)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Sealed Records v{__version__}"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )

    settings = get_settings()

    configure_audit_logger(settings.audit_log_dir).log_event(
        event_type=EventType.SYSTEM_START,
        severity=EventSeverity.INFO,
        message="Sealed Records starting",
        details={
            "version": __version__,
            "host": args.host,
            "port": args.port,
            "encryption_key_configured": bool(settings.encryption_key),
        }
    )

    from .api.main import start_api_server

    try:
        start_api_server(host=args.host, port=args.port, settings=settings)
    except KeyboardInterrupt:
        print("\n\nShutting down backend...")


if __name__ == "__main__":
    main()
