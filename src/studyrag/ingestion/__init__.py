"""Document ingestion: cleaning, chunking, embedding and storing."""

from .cleaner import Cleaner, clean_extracted_text
from .pipeline import CollectionStats, DocumentIngestionPipeline, IngestionResult, ReprocessSummary

__all__ = [
    "Cleaner",
    "clean_extracted_text",
    "CollectionStats",
    "DocumentIngestionPipeline",
    "IngestionResult",
    "ReprocessSummary",
]
