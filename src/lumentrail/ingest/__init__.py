"""LumenTrail ingest pipeline — chunker, orchestrator, file discovery."""

from lumentrail.ingest.chunker import TextSpan, chunk_text
from lumentrail.ingest.orchestrator import (
    SUPPORTED_EXTENSIONS,
    BatchReport,
    IngestionError,
    IngestRecord,
    IngestResult,
    UnsupportedExtension,
    file_item_id,
    ingest_file,
    ingest_paths,
    ingest_record,
)
from lumentrail.ingest.scan import DEFAULT_IGNORED, DirectoryWatcher, scan_directory

__all__ = [
    "BatchReport",
    "DEFAULT_IGNORED",
    "DirectoryWatcher",
    "IngestRecord",
    "IngestResult",
    "IngestionError",
    "SUPPORTED_EXTENSIONS",
    "TextSpan",
    "UnsupportedExtension",
    "chunk_text",
    "file_item_id",
    "ingest_file",
    "ingest_paths",
    "ingest_record",
    "scan_directory",
]
