# Audit Logging - codec and service events
#
# Append-only structured JSON log of seal/open outcomes and service events.
# Never carries plaintext, passphrases or key material: only sizes,
# outcomes and error kinds.

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog

from ..config import get_settings

AUDIT_LOGGER_NAME = "sealed_records.audit"


class EventType(str, Enum):
    """Types of events recorded in the audit log."""
    PAYLOAD_SEALED = "payload.sealed"
    PAYLOAD_OPENED = "payload.opened"
    PAYLOAD_REJECTED = "payload.rejected"
    PAYLOAD_SEAL_FAILED = "payload.seal_failed"

    CONFIG_MISSING = "config.missing"

    SYSTEM_START = "system.start"


class EventSeverity(str, Enum):
    """
    Severity levels for audit events.

    - INFO: normal activity
    - INVESTIGATE: something unusual, e.g. a malformed envelope
    - ALERT: authentication failure on an envelope
    - CRITICAL: the service cannot operate (missing key, crypto unavailable)
    """
    INFO = "info"
    INVESTIGATE = "investigate"
    ALERT = "alert"
    CRITICAL = "critical"


class AuditLogger:
    """
    Append-only audit logger.

    Features:
    - Structured JSON lines via structlog
    - Automatic timestamp and event ID
    - One file per day under ``log_dir``
    - Read-back for tests and forensic review
    """

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for audit logs (default: ./audit_logs)
        """
        self.log_dir = Path(log_dir or "./audit_logs")
        self.log_dir.mkdir(parents=True, exist_ok=True)

        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        self._setup_file_handler()

        self.logger = structlog.get_logger(AUDIT_LOGGER_NAME)

    @property
    def log_file(self) -> Path:
        today = datetime.now().strftime("%Y-%m-%d")
        return self.log_dir / f"audit_{today}.log"

    def _setup_file_handler(self):
        """Attach a file handler for today's log, replacing any earlier one."""
        audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
        for handler in list(audit_logger.handlers):
            if getattr(handler, "_sealed_records_audit", False):
                audit_logger.removeHandler(handler)
                handler.close()

        file_handler = logging.FileHandler(self.log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))  # structlog handles formatting
        file_handler._sealed_records_audit = True

        audit_logger.addHandler(file_handler)
        audit_logger.setLevel(logging.INFO)
        audit_logger.propagate = False

    def log_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log an audit event.

        Args:
            event_type: Type of event (from EventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (never secrets)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())

        self.logger.info(
            "audit_event",
            event_id=event_id,
            event_type=event_type.value,
            severity=severity.value,
            message=message,
            recorded_at=datetime.now(timezone.utc).isoformat(),
            details=details or {},
        )

        return event_id

    def log_codec_event(
        self,
        event_type: EventType,
        message: str,
        error_kind: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log the outcome of a seal/open call.

        Authentication failures are ALERT, an unavailable primitive is
        CRITICAL, any other rejection is INVESTIGATE.
        """
        event_details = dict(details or {})
        severity = EventSeverity.INFO
        if error_kind:
            event_details["error_kind"] = error_kind
            if error_kind == "AuthenticationError":
                severity = EventSeverity.ALERT
            elif error_kind == "EncryptionError":
                severity = EventSeverity.CRITICAL
            else:
                severity = EventSeverity.INVESTIGATE

        return self.log_event(
            event_type=event_type,
            severity=severity,
            message=f"Codec: {message}",
            details=event_details,
        )

    def read_events(self, event_type: Optional[EventType] = None) -> List[Dict[str, Any]]:
        """Return today's events, oldest first, optionally filtered by type."""
        for handler in logging.getLogger(AUDIT_LOGGER_NAME).handlers:
            handler.flush()

        if not self.log_file.exists():
            return []

        events = []
        with open(self.log_file, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                event = json.loads(line)
                if event_type is None or event.get("event_type") == event_type.value:
                    events.append(event)
        return events


# Global logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Get global audit logger (singleton pattern)."""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger(log_dir=get_settings().audit_log_dir)
    return _audit_logger


def configure_audit_logger(log_dir: Path) -> AuditLogger:
    """Point the global audit logger at ``log_dir``.

    The existing instance is kept when it already writes there. Only one
    audit directory is active per process; the last call wins.
    """
    global _audit_logger
    log_dir = Path(log_dir)
    if _audit_logger is None or _audit_logger.log_dir.resolve() != log_dir.resolve():
        _audit_logger = AuditLogger(log_dir=log_dir)
    return _audit_logger
