"""Record models shared by the data source, the API and the consumer."""

from typing import List

from pydantic import BaseModel


class RecordItem(BaseModel):
    id: str
    title: str
    type: str
    sensitivity: str
    date: str


class RecordsDocument(BaseModel):
    """The JSON document that gets sealed in transit."""

    timestamp: str
    records: List[RecordItem]
