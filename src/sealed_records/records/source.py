"""Records data source.

Stands in for the internal database or service that owns the sensitive
records. The API seals whatever this returns.
"""

from datetime import datetime, timezone
from typing import Optional

from .models import RecordItem, RecordsDocument

SAMPLE_RECORDS = [
    ("1", "Patient Survey #001", "Survey", "Confidential", "2024-01-15"),
    ("2", "Patient Survey #002", "Survey", "Private", "2024-01-16"),
    ("3", "Medical Record #101", "Record", "Highly Confidential", "2024-01-17"),
    ("4", "Patient Survey #003", "Survey", "Confidential", "2024-01-18"),
    ("5", "Medical Record #102", "Record", "Confidential", "2024-01-19"),
    ("6", "Patient Survey #004", "Survey", "Private", "2024-01-20"),
    ("7", "Medical Record #103", "Record", "Highly Confidential", "2024-01-21"),
    ("8", "Patient Survey #005", "Survey", "Confidential", "2024-01-22"),
]


def load_records_document(now: Optional[datetime] = None) -> RecordsDocument:
    """Return the current records snapshot stamped with ``now`` (UTC)."""
    now = now or datetime.now(timezone.utc)
    return RecordsDocument(
        timestamp=now.isoformat(),
        records=[
            RecordItem(id=rid, title=title, type=rtype, sensitivity=sensitivity, date=date)
            for rid, title, rtype, sensitivity, date in SAMPLE_RECORDS
        ],
    )


def serialize_document(document: RecordsDocument) -> str:
    """Compact JSON text for sealing."""
    return document.model_dump_json()
