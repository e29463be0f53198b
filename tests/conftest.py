"""
Shared pytest fixtures for the Sealed Records test suite.

Autouse fixtures below isolate tests from the live environment:
  - Audit logger  -> temp directory   (prevents test events in ./audit_logs)
  - Settings      -> clean environment (no ENCRYPTION_KEY or .env leakage)
"""

import pytest

_ENV_VARS = (
    "ENCRYPTION_KEY",
    "SEALED_RECORDS_KDF_SALT",
    "SEALED_RECORDS_BASE_URL",
    "SEALED_RECORDS_ALLOWED_ORIGINS",
    "SEALED_RECORDS_AUDIT_DIR",
)


@pytest.fixture(autouse=True)
def _isolate_audit_logs(tmp_path):
    """Point the global AuditLogger at a temp directory for every test."""
    import sealed_records.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = audit_mod.AuditLogger(log_dir=tmp_path / "audit_logs")

    yield audit_mod._audit_logger

    audit_mod._audit_logger = old_logger


@pytest.fixture(autouse=True)
def _isolate_settings(tmp_path, monkeypatch):
    """Clear config env vars and the settings singleton.

    setenv-then-delenv makes monkeypatch remember each variable's original
    state, so anything load_dotenv() writes during a test is undone too.
    """
    import sealed_records.config as config_mod

    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("SEALED_RECORDS_ENV_FILE", str(tmp_path / "missing.env"))

    config_mod.reset_settings()
    yield
    config_mod.reset_settings()


@pytest.fixture
def audit_logger(_isolate_audit_logs):
    return _isolate_audit_logs
