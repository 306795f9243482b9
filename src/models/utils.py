"""Field normalization for raw extraction payloads.

Model output and pattern output arrive with loosely typed values: a draft
may be ``"12.2 m"``, ``12.2`` or missing altogether. Everything here maps
those shapes onto one canonical form, a nullable string.
"""

import json
import math
from typing import Any, Dict, Mapping, Optional

from pydantic.alias_generators import to_camel

from src.models.schema import NOTE_FIELDS


def normalize_value(value: Any, max_length: Optional[int] = None) -> Optional[str]:
    """Coerce a single payload value into a nullable string.
    
    Case coverage:
    - None -> None
    - str -> itself, or None when blank
    - bool -> "True" / "False" (checked before numbers, bool is an int)
    - int/float -> str(value); NaN and infinities -> None
    - dict/list/tuple -> compact JSON text
    - anything else -> str(value)
    
    Args:
        value: Raw value from a model or pattern payload
        max_length: Optional cap applied to the resulting string
    
    Returns:
        Non-empty string or None
    """
    if value is None:
        return None
    
    if isinstance(value, str):
        text = value
    elif isinstance(value, bool):
        text = str(value)
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        text = str(value)
    elif isinstance(value, (dict, list, tuple)):
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    else:
        text = str(value)
    
    if not text.strip():
        return None
    
    if max_length is not None and len(text) > max_length:
        text = text[:max_length]
    
    return text


def normalize_payload(
    payload: Mapping[str, Any],
    max_length: Optional[int] = None
) -> Dict[str, Optional[str]]:
    """Normalize a raw payload into a dict keyed by every note field.
    
    The result always has exactly the keys in ``NOTE_FIELDS``. Keys may be
    given in camelCase (``maxDraftMeters``) or snake_case
    (``max_draft_meters``); camelCase wins when both are present. Unknown
    keys are dropped.
    
    Args:
        payload: Raw mapping produced by an extractor
        max_length: Optional cap for each string value
    
    Returns:
        Dictionary of camelCase field name -> nullable string
    """
    canonical: Dict[str, Any] = {}
    for key, value in payload.items():
        if not isinstance(key, str):
            continue
        name = key if key in NOTE_FIELDS else to_camel(key)
        if name not in NOTE_FIELDS:
            continue
        if name in canonical and key != name:
            continue
        canonical[name] = value
    
    return {
        name: normalize_value(canonical.get(name), max_length=max_length)
        for name in NOTE_FIELDS
    }
