# Configuration - process settings from the environment
#
# The passphrase is read once here and threaded explicitly into every
# seal/open call. The codec itself never reads configuration.

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_FILE_VAR = "SEALED_RECORDS_ENV_FILE"

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000", "http://127.0.0.1:3000",
    "http://localhost:8000", "http://127.0.0.1:8000",
]


class ConfigurationError(Exception):
    """Raised when a required setting is missing or invalid."""


@dataclass
class Settings:
    encryption_key: Optional[str] = None
    kdf_salt: bytes = b"salt"
    base_url: str = DEFAULT_BASE_URL
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    audit_log_dir: Path = Path("./audit_logs")

    def require_encryption_key(self) -> str:
        """Return the configured passphrase or raise ConfigurationError."""
        if not self.encryption_key:
            raise ConfigurationError("ENCRYPTION_KEY environment variable is not set")
        return self.encryption_key


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build Settings from environment variables.

    A ``.env`` file is loaded first (``SEALED_RECORDS_ENV_FILE`` or ./.env);
    variables already present in the environment win.

    Variables:
        ENCRYPTION_KEY: shared passphrase for seal/open
        SEALED_RECORDS_KDF_SALT: per-deployment KDF salt (default "salt")
        SEALED_RECORDS_BASE_URL: where the consumer fetches envelopes from
        SEALED_RECORDS_ALLOWED_ORIGINS: comma-separated CORS origins
        SEALED_RECORDS_AUDIT_DIR: audit log directory
    """
    env_path = env_file or Path(os.getenv(ENV_FILE_VAR, ".env"))
    if env_path.exists():
        load_dotenv(env_path, override=False)
        logger.debug("Loaded environment from %s", env_path)

    settings = Settings(encryption_key=os.getenv("ENCRYPTION_KEY") or None)

    salt = os.getenv("SEALED_RECORDS_KDF_SALT")
    if salt:
        settings.kdf_salt = salt.encode("utf-8")

    base_url = os.getenv("SEALED_RECORDS_BASE_URL")
    if base_url:
        settings.base_url = base_url.rstrip("/")

    origins = os.getenv("SEALED_RECORDS_ALLOWED_ORIGINS")
    if origins:
        settings.allowed_origins = _split_origins(origins)

    audit_dir = os.getenv("SEALED_RECORDS_AUDIT_DIR")
    if audit_dir:
        settings.audit_log_dir = Path(audit_dir)

    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get process settings (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
