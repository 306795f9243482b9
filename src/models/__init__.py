"""Data models for the port notes system."""

from src.models.schema import (
    Operation,
    PortOperationRecord,
    FIELD_ATTRIBUTES,
    NOTE_FIELDS,
    REQUIRED_FIELDS,
    EXTRACTED_OPERATIONS,
    NUMERIC_LIKE_FIELDS,
    SUMMARY_FIELDS,
)
from src.models.utils import normalize_value, normalize_payload

__all__ = [
    # Record model
    "Operation",
    "PortOperationRecord",
    "FIELD_ATTRIBUTES",
    "NOTE_FIELDS",
    "REQUIRED_FIELDS",
    "EXTRACTED_OPERATIONS",
    "NUMERIC_LIKE_FIELDS",
    "SUMMARY_FIELDS",
    # Normalization
    "normalize_value",
    "normalize_payload",
]
