"""File records and the service-facing file API."""

from spacevault.files.records import FileRecordStore, record_to_stored_file
from spacevault.files.service import FileService

__all__ = ["FileRecordStore", "FileService", "record_to_stored_file"]
