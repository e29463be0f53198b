"""Sealed records API routes.

The records document is sealed server-side with the configured passphrase
and handed out only as an opaque envelope string.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..codec import AuthenticatedCodec, EncryptionError
from ..config import Settings
from ..core import AuditLogger, EventSeverity, EventType
from ..records import load_records_document, serialize_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["records"])


# ── Dependencies ─────────────────────────────────────────────────────


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_app_audit_logger(request: Request) -> AuditLogger:
    return request.app.state.audit_logger


def get_codec(settings: Settings = Depends(get_app_settings)) -> AuthenticatedCodec:
    return AuthenticatedCodec(salt=settings.kdf_salt)


# ── Pydantic Models ──────────────────────────────────────────────────


class EncryptedDataResponse(BaseModel):
    encryptedData: str


# ── Routes ───────────────────────────────────────────────────────────


@router.get("/encrypted-data", response_model=EncryptedDataResponse)
def get_encrypted_data(
    settings: Settings = Depends(get_app_settings),
    codec: AuthenticatedCodec = Depends(get_codec),
    audit: AuditLogger = Depends(get_app_audit_logger),
):
    """Return the records document sealed as ``nonce:tag:ciphertext``.

    Sync endpoint: FastAPI runs it in the threadpool, so scrypt does not
    block the event loop.
    """
    if not settings.encryption_key:
        audit.log_event(
            event_type=EventType.CONFIG_MISSING,
            severity=EventSeverity.CRITICAL,
            message="Encryption key not configured",
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Encryption key not configured"},
        )

    plaintext = serialize_document(load_records_document())

    try:
        envelope = codec.seal(plaintext, settings.encryption_key)
    except EncryptionError as e:
        logger.error("Encryption error: %s", e)
        audit.log_codec_event(
            EventType.PAYLOAD_SEAL_FAILED,
            "records document could not be sealed",
            error_kind=type(e).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to encrypt data"},
        )

    audit.log_codec_event(
        EventType.PAYLOAD_SEALED,
        "records document sealed",
        details={"plaintext_bytes": len(plaintext.encode("utf-8"))},
    )
    return {"encryptedData": envelope}


@router.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}
