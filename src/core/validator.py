"""Record validation - turns a normalized payload into a PortOperationRecord."""

from typing import Any, Mapping, Optional

from src.core.exceptions import ValidationError
from src.models.schema import FIELD_ATTRIBUTES, Operation, PortOperationRecord
from src.config.settings import Settings, get_settings
from src.config.logging_config import get_logger

logger = get_logger(__name__)


def coerce_operation(value: Any) -> Operation:
    """Map any operation value onto the closed Operation enumeration.
    
    Last-resort normalization, applied even when the model already chose
    a value, since nothing guarantees it stayed inside the enumeration:
    - "dis..." or "unload..." -> Discharge
    - "bun..." -> Bunker
    - anything else, including None and "unknown" -> Load
    
    Args:
        value: Operation value from the payload
    
    Returns:
        Operation enum member
    """
    if value is None:
        return Operation.LOAD
    
    text = str(value).strip().lower()
    if text.startswith("dis") or text.startswith("unload"):
        return Operation.DISCHARGE
    if text.startswith("bun"):
        return Operation.BUNKER
    return Operation.LOAD


class RecordValidator:
    """Check mandatory fields and build the final record.
    
    Default policy: a missing port or terminal is replaced by a
    placeholder. The strict policy rejects such payloads with
    ValidationError instead.
    """
    
    def __init__(
        self,
        strict: Optional[bool] = None,
        placeholder_port: str = None,
        placeholder_terminal: str = None,
        settings: Optional[Settings] = None
    ):
        """
        Initialize the validator.
        
        Args:
            strict: Reject missing port/terminal (defaults to config)
            placeholder_port: Value used for a missing port (defaults to config)
            placeholder_terminal: Value used for a missing terminal (defaults to config)
            settings: Settings instance (defaults to global)
        """
        settings = settings or get_settings()
        self.strict = settings.strict_mandatory_fields if strict is None else strict
        self.placeholder_port = placeholder_port or settings.placeholder_port
        self.placeholder_terminal = placeholder_terminal or settings.placeholder_terminal
    
    def validate(self, payload: Mapping[str, Optional[str]], raw_text: str) -> PortOperationRecord:
        """
        Build a record from a normalized payload.
        
        Args:
            payload: Output of normalize_payload (camelCase keys, nullable strings)
            raw_text: Trimmed note text, stored verbatim
        
        Returns:
            PortOperationRecord without id/created_at (assigned by the store)
        
        Raises:
            ValidationError: If strict and port or terminal is missing
        """
        port = payload.get("port")
        terminal = payload.get("terminal")
        
        missing = [name for name, value in (("port", port), ("terminal", terminal)) if not value]
        if missing:
            if self.strict:
                raise ValidationError(missing)
            logger.info(f"Using placeholders for missing fields: {missing}")
        
        fields = {
            FIELD_ATTRIBUTES[name]: value
            for name, value in payload.items()
            if name in FIELD_ATTRIBUTES
        }
        fields["port"] = port or self.placeholder_port
        fields["terminal"] = terminal or self.placeholder_terminal
        fields["operation"] = coerce_operation(payload.get("operation"))
        
        return PortOperationRecord(raw_text=raw_text, **fields)
