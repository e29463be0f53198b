"""Tests for the sealed records API.

Covers:
  - GET /api/encrypted-data returns an envelope that opens to the records document
  - 500 responses for a missing key and an unavailable cipher
  - CORS preflight for configured origins
  - Audit events never carry the passphrase or plaintext
"""

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import sealed_records
from sealed_records.api.main import create_app
from sealed_records.codec import AuthenticatedCodec, AuthenticationError, EncryptionError, open_envelope
from sealed_records.config import Settings
from sealed_records.core import EventType
from sealed_records.records import RecordsDocument

TEST_KEY = "route-test-passphrase"
ALLOWED_ORIGIN = "https://records.example.com"


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def settings(tmp_path):
    return Settings(
        encryption_key=TEST_KEY,
        allowed_origins=[ALLOWED_ORIGIN],
        audit_log_dir=tmp_path / "audit_logs",
    )


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


# ── Tests ────────────────────────────────────────────────────────────

class TestEncryptedData:

    def test_returns_envelope(self, client):
        resp = client.get("/api/encrypted-data")

        assert resp.status_code == 200
        body = resp.json()
        assert set(body) == {"encryptedData"}
        assert len(body["encryptedData"].split(":")) == 3

    def test_envelope_opens_to_records_document(self, client):
        envelope = client.get("/api/encrypted-data").json()["encryptedData"]

        document = RecordsDocument.model_validate(json.loads(open_envelope(envelope, TEST_KEY)))
        assert len(document.records) == 8
        assert document.records[0].title == "Patient Survey #001"
        assert document.records[2].sensitivity == "Highly Confidential"

    def test_fresh_envelope_per_request(self, client):
        first = client.get("/api/encrypted-data").json()["encryptedData"]
        second = client.get("/api/encrypted-data").json()["encryptedData"]
        assert first != second

    def test_envelope_does_not_open_with_other_key(self, client):
        envelope = client.get("/api/encrypted-data").json()["encryptedData"]
        with pytest.raises(AuthenticationError):
            open_envelope(envelope, "not-the-key")

    def test_configured_salt_is_used(self, tmp_path):
        settings = Settings(
            encryption_key=TEST_KEY,
            kdf_salt=b"deployment-salt",
            audit_log_dir=tmp_path / "audit_logs",
        )
        envelope = TestClient(create_app(settings)).get("/api/encrypted-data").json()["encryptedData"]

        with pytest.raises(AuthenticationError):
            open_envelope(envelope, TEST_KEY)
        assert AuthenticatedCodec(salt=b"deployment-salt").open(envelope, TEST_KEY)

    def test_missing_key_returns_500(self, tmp_path, audit_logger):
        client = TestClient(create_app(Settings(audit_log_dir=tmp_path / "audit_logs")))

        resp = client.get("/api/encrypted-data")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Encryption key not configured"}
        events = audit_logger.read_events(EventType.CONFIG_MISSING)
        assert len(events) == 1
        assert events[0]["severity"] == "critical"

    def test_encryption_failure_returns_500(self, client, audit_logger):
        with patch.object(
            AuthenticatedCodec, "seal",
            side_effect=EncryptionError("Random source unavailable"),
        ):
            resp = client.get("/api/encrypted-data")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to encrypt data"}
        failed = audit_logger.read_events(EventType.PAYLOAD_SEAL_FAILED)
        assert failed[0]["details"]["error_kind"] == EncryptionError.__name__
        assert failed[0]["severity"] == "critical"
        assert audit_logger.read_events(EventType.PAYLOAD_REJECTED) == []

    def test_seal_is_audited_without_secrets(self, client, audit_logger):
        client.get("/api/encrypted-data")

        sealed = audit_logger.read_events(EventType.PAYLOAD_SEALED)
        assert len(sealed) == 1
        assert sealed[0]["details"]["plaintext_bytes"] > 0

        log_text = audit_logger.log_file.read_text(encoding="utf-8")
        assert TEST_KEY not in log_text
        assert "Patient Survey" not in log_text


class TestCors:

    def test_preflight_allowed_origin(self, client):
        resp = client.options(
            "/api/encrypted-data",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "GET",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        allowed = resp.headers["access-control-allow-methods"]
        assert "GET" in allowed and "OPTIONS" in allowed

    def test_preflight_unknown_origin_rejected(self, client):
        resp = client.options(
            "/api/encrypted-data",
            headers={
                "Origin": "https://evil.example.com",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert resp.status_code == 400
        assert "access-control-allow-origin" not in resp.headers


class TestHealth:

    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestAppSettings:

    def test_audit_events_go_to_configured_dir(self, tmp_path):
        audit_dir = tmp_path / "deployment_audit"
        app = create_app(Settings(encryption_key=TEST_KEY, audit_log_dir=audit_dir))

        TestClient(app).get("/api/encrypted-data")

        assert app.state.audit_logger.log_dir == audit_dir
        assert len(app.state.audit_logger.read_events(EventType.PAYLOAD_SEALED)) == 1
        assert app.state.audit_logger.log_file.parent == audit_dir

    def test_app_version_is_package_version(self, settings):
        assert create_app(settings).version == sealed_records.__version__
