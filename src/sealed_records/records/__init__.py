"""Records: models, data source and the server-side consumer."""

from .consumer import RecordsClient, RecordsFetchError
from .models import RecordItem, RecordsDocument
from .source import load_records_document, serialize_document

__all__ = [
    "RecordsClient",
    "RecordsFetchError",
    "RecordItem",
    "RecordsDocument",
    "load_records_document",
    "serialize_document",
]
