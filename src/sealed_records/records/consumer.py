# Records Consumer - server-side fetch + open
#
# Fetches the sealed records envelope from the API and opens it on the
# server, handing only the parsed document onward. The envelope and the
# passphrase never leave this module.
#
# Codec failures propagate unchanged and are fatal for the request being
# served; nothing here retries.

import json
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..codec import AuthenticatedCodec, CodecError
from ..config import Settings
from ..core import EventType, get_audit_logger
from .models import RecordsDocument

logger = logging.getLogger(__name__)

ENCRYPTED_DATA_PATH = "/api/encrypted-data"
REQUEST_TIMEOUT_SEC = 10.0


class RecordsFetchError(Exception):
    """Raised when the envelope cannot be fetched or the payload is not a records document."""


class RecordsClient:
    """Fetch and open the sealed records document.

    Usage::

        client = RecordsClient.from_settings(get_settings())
        document = client.fetch_records()
    """

    def __init__(
        self,
        base_url: str,
        passphrase: str,
        codec: Optional[AuthenticatedCodec] = None,
        timeout: float = REQUEST_TIMEOUT_SEC,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._passphrase = passphrase
        self._codec = codec or AuthenticatedCodec()
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RecordsClient":
        """Build a client that uses the same base URL, passphrase and KDF salt as the API.

        Raises:
            ConfigurationError: ENCRYPTION_KEY is not set
        """
        return cls(
            settings.base_url,
            settings.require_encryption_key(),
            codec=AuthenticatedCodec(salt=settings.kdf_salt),
            **kwargs,
        )

    def fetch_envelope(self) -> str:
        """GET the envelope string from the API."""
        url = f"{self._base_url}{ENCRYPTED_DATA_PATH}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(url, headers={"Accept": "application/json"})
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch encrypted data from %s: %s", url, exc)
            raise RecordsFetchError(f"Failed to fetch encrypted data: {exc}") from exc
        except ValueError as exc:
            raise RecordsFetchError("Encrypted data response is not JSON") from exc

        envelope = body.get("encryptedData") if isinstance(body, dict) else None
        if not isinstance(envelope, str):
            raise RecordsFetchError("Response is missing the encryptedData field")
        return envelope

    def fetch_records(self) -> RecordsDocument:
        """Fetch, open and parse the records document."""
        envelope = self.fetch_envelope()
        audit = get_audit_logger()

        try:
            plaintext = self._codec.open(envelope, self._passphrase)
        except CodecError as exc:
            audit.log_codec_event(
                EventType.PAYLOAD_REJECTED,
                "records envelope rejected",
                error_kind=type(exc).__name__,
            )
            raise

        audit.log_codec_event(
            EventType.PAYLOAD_OPENED,
            "records envelope opened",
            details={"plaintext_bytes": len(plaintext.encode("utf-8"))},
        )

        try:
            return RecordsDocument.model_validate(json.loads(plaintext))
        except (ValueError, ValidationError) as exc:
            raise RecordsFetchError("Decrypted payload is not a records document") from exc
