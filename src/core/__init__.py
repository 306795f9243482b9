"""Core business logic modules."""

from src.core.exceptions import (
    PortNotesError,
    InputError,
    ModelExtractionError,
    UpstreamError,
    ParseError,
    ValidationError,
    PersistenceError,
)
from src.core.model_extractor import ModelExtractor
from src.core.pattern_extractor import PatternExtractor
from src.core.validator import RecordValidator, coerce_operation
from src.core.workflow import ExtractionWorkflow, ExtractionState
from src.core.record_store import RecordStore
from src.core.ingestion_service import IngestionService, IngestionResponse

__all__ = [
    "PortNotesError",
    "InputError",
    "ModelExtractionError",
    "UpstreamError",
    "ParseError",
    "ValidationError",
    "PersistenceError",
    "ModelExtractor",
    "PatternExtractor",
    "RecordValidator",
    "coerce_operation",
    "ExtractionWorkflow",
    "ExtractionState",
    "RecordStore",
    "IngestionService",
    "IngestionResponse",
]
