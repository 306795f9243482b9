"""Pattern extraction - deterministic fallback parser for port notes.

Used when the model path is unavailable or returns something unusable.
Every rule is a plain function of the note text returning the fields it
found, so new note templates can be supported by appending a rule
without touching the existing ones.

The rules are tied to the briefing template agents commonly use, e.g.::

    - **Terminal:** LB212
    - **Cargo & SF:** Wheat in bulk - 45 cbft
    - **Quantity:** 60,000 MT 10% MOLOO
    - Max Draft: 12,50 m SW
    - Per day: abt 24,000 MT/shift
    - Water Density: 1.025
    - **Pilotage:** USD 3,500
"""

import re
from typing import Callable, Dict, Iterable, Optional, Tuple

from src.models.schema import NOTE_FIELDS, Operation
from src.config.logging_config import get_logger

logger = get_logger(__name__)

PatternRule = Callable[[str], Dict[str, Optional[str]]]


_DISCHARGE_RE = re.compile(r"discharg|unload", re.IGNORECASE)
_BUNKER_RE = re.compile(r"bunker", re.IGNORECASE)

_TERMINAL_RE = re.compile(
    r"Terminal\s*:[ \t]*(?:\*+[ \t]*)?([A-Za-z0-9][A-Za-z0-9\- ]*)",
    re.IGNORECASE,
)
_CARGO_SF_RE = re.compile(
    r"Cargo\s*&\s*SF\s*:(.*?)Quantity",
    re.IGNORECASE | re.DOTALL,
)
_MAX_DRAFT_RE = re.compile(
    r"Max\.?\s*Draft[^\n]*?(\d+(?:[.,]\d+)?)\s*(?:m\b|mtrs?\b|metres?\b|meters?\b)",
    re.IGNORECASE,
)
_LOAD_RATE_RE = re.compile(
    r"Per\s+day\b[^\n]*?(\d[\d,]*)\s*(?:MTS?|tons?)\s*/\s*(?:shift|day)\b",
    re.IGNORECASE,
)
_WATER_DENSITY_RE = re.compile(
    r"Water\s+Density\s*:\s*\**\s*(\d+(?:[.,]\d+)?)",
    re.IGNORECASE,
)

# Trailing markdown left over between a value and the next bullet label
_LEADING_MARKUP_RE = re.compile(r"^[\s*]+")
_TRAILING_MARKUP_RE = re.compile(r"[\s*\-]+$")


def _bold_label_pattern(label: str) -> re.Pattern:
    # "**Label:** value" and "**Label**: value"
    return re.compile(
        r"\*\*\s*" + label + r"\s*(?::\s*\*\*|\*\*\s*:)[ \t]*([^\n]*)",
        re.IGNORECASE,
    )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = _LEADING_MARKUP_RE.sub("", value)
    value = _TRAILING_MARKUP_RE.sub("", value)
    return value or None


def _decimal(value: str) -> str:
    return value.replace(",", ".")


def extract_operation(text: str) -> Dict[str, Optional[str]]:
    """Map operation keywords onto the Operation enum.

    Discharge keywords are checked before bunker keywords, and both before
    the Load default, so a note mentioning bunkers during loading still
    resolves to Bunker.
    """
    if _DISCHARGE_RE.search(text):
        operation = Operation.DISCHARGE
    elif _BUNKER_RE.search(text):
        operation = Operation.BUNKER
    else:
        operation = Operation.LOAD
    return {"operation": operation.value}


def extract_terminal(text: str) -> Dict[str, Optional[str]]:
    """First run of alphanumerics, dashes and spaces after ``Terminal:`` on the same line."""
    match = _TERMINAL_RE.search(text)
    if not match:
        return {"terminal": None}
    return {"terminal": match.group(1).strip(" -") or None}


def extract_cargo_and_stow_factor(text: str) -> Dict[str, Optional[str]]:
    """Split the ``Cargo & SF:`` block on its first dash.

    ``Wheat in bulk - 45 cbft`` gives cargo ``Wheat in bulk`` and stow
    factor ``45 cbft``. Without a dash the stow factor stays None.
    """
    match = _CARGO_SF_RE.search(text)
    if not match:
        return {"cargo": None, "stowFactor": None}

    block = _clean(match.group(1))
    if block is None:
        return {"cargo": None, "stowFactor": None}

    cargo, dash, stow_factor = block.partition("-")
    return {
        "cargo": _clean(cargo),
        "stowFactor": _clean(stow_factor) if dash else None,
    }


def extract_max_draft(text: str) -> Dict[str, Optional[str]]:
    """First decimal followed by a metre unit on the ``Max Draft`` line."""
    match = _MAX_DRAFT_RE.search(text)
    return {"maxDraftMeters": _decimal(match.group(1)) if match else None}


def extract_load_rate(text: str) -> Dict[str, Optional[str]]:
    """Integer before an ``MT/shift``-style unit on the ``Per day`` line."""
    match = _LOAD_RATE_RE.search(text)
    if not match:
        return {"loadRatePerDayMt": None}
    return {"loadRatePerDayMt": match.group(1).replace(",", "") or None}


def extract_water_density(text: str) -> Dict[str, Optional[str]]:
    match = _WATER_DENSITY_RE.search(text)
    return {"waterDensity": _decimal(match.group(1)) if match else None}


def _line_after_bold_label(field_name: str, label: str) -> PatternRule:
    pattern = _bold_label_pattern(label)

    def rule(text: str) -> Dict[str, Optional[str]]:
        match = pattern.search(text)
        return {field_name: _clean(match.group(1)) if match else None}

    rule.__name__ = f"extract_{field_name}"
    rule.__doc__ = f"Remainder of the line after a bold ``{label}:`` label."
    return rule


extract_cost_pilotage = _line_after_bold_label("costPilotage", "Pilotage")
extract_cost_dockage = _line_after_bold_label("costDockage", "Dockage")
extract_cost_total_estimate = _line_after_bold_label("costTotalEstimate", "Total")


DEFAULT_RULES: Tuple[PatternRule, ...] = (
    extract_operation,
    extract_terminal,
    extract_cargo_and_stow_factor,
    extract_max_draft,
    extract_load_rate,
    extract_water_density,
    extract_cost_pilotage,
    extract_cost_dockage,
    extract_cost_total_estimate,
)


class PatternExtractor:
    """Extract a best-effort payload from a port note using regex rules.

    This path never fails and never touches the network: identical text
    always yields an identical payload. Fields no rule covers are None,
    including ``port`` and ``country``, which need context only the model
    path can supply.
    """

    def __init__(self, rules: Optional[Iterable[PatternRule]] = None):
        """
        Initialize the extractor.

        Args:
            rules: Ordered rule functions (defaults to DEFAULT_RULES).
                   A later rule never overwrites a value set by an earlier one.
        """
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def parse(self, raw_text: str) -> Dict[str, Optional[str]]:
        """
        Apply every rule to the note.

        Args:
            raw_text: Note text

        Returns:
            Dictionary with every key in NOTE_FIELDS, values None or strings
        """
        payload: Dict[str, Optional[str]] = {name: None for name in NOTE_FIELDS}

        for rule in self.rules:
            for field_name, value in rule(raw_text).items():
                if field_name in payload and payload[field_name] is None:
                    payload[field_name] = value

        found = sorted(name for name, value in payload.items() if value is not None)
        logger.debug(f"Pattern extraction found {len(found)} fields: {found}")

        return payload
