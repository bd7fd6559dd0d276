"""Record store adapters - Airtable implementation."""

from .store import AirtableRecordStore

__all__ = ["AirtableRecordStore"]
