"""Error taxonomy for the port note ingestion pipeline.

``UpstreamError`` and ``ParseError`` are recoverable: the extraction
workflow catches them and switches to pattern extraction. The rest reach
the ingestion service, which maps them onto client or server outcomes.
"""

from typing import Sequence


class PortNotesError(Exception):
    """Base class for all pipeline errors."""


class InputError(PortNotesError):
    """The note text is missing, not a string, or blank."""


class ModelExtractionError(PortNotesError):
    """The model path could not produce a payload."""


class UpstreamError(ModelExtractionError):
    """The model service is unavailable: missing credential, quota, network, timeout."""


class ParseError(ModelExtractionError):
    """The model answered, but not with a usable JSON object."""


class ValidationError(PortNotesError):
    """Mandatory fields are missing and the strict policy forbids placeholders."""
    
    def __init__(self, missing_fields: Sequence[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing mandatory fields: {', '.join(self.missing_fields)}")


class PersistenceError(PortNotesError):
    """The record store could not persist or read entries."""
