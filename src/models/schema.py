"""Port operation data schema - the canonical record produced from a port note."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class Operation(str, Enum):
    """Closed enumeration of port call operations.
    
    Free text such as "loading", "discharging" or "bunkering" is mapped
    onto these values by the pattern extractor and the record validator.
    """
    LOAD = "Load"
    DISCHARGE = "Discharge"
    BUNKER = "Bunker"
    UNKNOWN = "Unknown"


class PortOperationRecord(BaseModel):
    """Structured record extracted from one free-text port/terminal note.
    
    Attribute names are snake_case; the external names (JSON envelopes,
    model prompt, stored file) are camelCase aliases, e.g.
    ``max_draft_meters`` <-> ``maxDraftMeters``. Both spellings are
    accepted on construction.
    
    Every optional field is either None or a non-empty string. Values
    that look numeric (drafts, rates, densities) keep their original
    units and formatting as text, e.g. ``"15.24 m"``.
    
    Records are frozen: the store assigns ``id`` and ``created_at`` by
    returning a copy, never by mutating the record the pipeline built.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
    
    # Identity/provenance
    id: Optional[int] = Field(None, description="Identifier assigned by the store")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp assigned by the store")
    raw_text: str = Field(description="Verbatim input note (trimmed only)")
    
    # Required
    port: NonEmptyStr = Field(description="Port name")
    terminal: NonEmptyStr = Field(description="Terminal or berth name")
    operation: Operation = Field(description="Operation performed at the terminal")
    
    # Descriptive
    country: Optional[NonEmptyStr] = None
    cargo: Optional[NonEmptyStr] = None
    stow_factor: Optional[NonEmptyStr] = None
    quantity_info: Optional[NonEmptyStr] = None
    
    # Vessel/berth constraints
    water_density: Optional[NonEmptyStr] = None
    max_draft_meters: Optional[NonEmptyStr] = None
    max_draft_notes: Optional[NonEmptyStr] = None
    loa_meters: Optional[NonEmptyStr] = None
    beam_meters: Optional[NonEmptyStr] = None
    max_dwt_mt: Optional[NonEmptyStr] = None
    air_draft_meters: Optional[NonEmptyStr] = None
    min_freeboard_meters: Optional[NonEmptyStr] = None
    
    # Throughput
    load_rate_per_day_mt: Optional[NonEmptyStr] = None
    discharge_rate_per_day_mt: Optional[NonEmptyStr] = None
    
    # Commercial
    agents: Optional[NonEmptyStr] = None
    cost_dockage: Optional[NonEmptyStr] = None
    cost_pilotage: Optional[NonEmptyStr] = None
    cost_towage: Optional[NonEmptyStr] = None
    cost_total_estimate: Optional[NonEmptyStr] = None
    
    # Operational notes
    bunkering_notes: Optional[NonEmptyStr] = None
    cleaning_notes: Optional[NonEmptyStr] = None
    transit_ps_notes: Optional[NonEmptyStr] = None
    sulphur_limit: Optional[NonEmptyStr] = None
    special_restrictions: Optional[NonEmptyStr] = None
    
    def to_entry(self) -> Dict[str, Any]:
        """Return the JSON-ready external representation (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
    
    def to_summary(self) -> Dict[str, Any]:
        """Return the listing projection of this record."""
        entry = self.to_entry()
        return {key: entry[key] for key in SUMMARY_FIELDS}


_PROVENANCE_ATTRS = ("id", "created_at", "raw_text")

# camelCase name -> attribute name, for every field the extractors produce
FIELD_ATTRIBUTES: Dict[str, str] = {
    to_camel(name): name
    for name in PortOperationRecord.model_fields
    if name not in _PROVENANCE_ATTRS
}

# Ordered camelCase names of all extractable fields
NOTE_FIELDS: Tuple[str, ...] = tuple(FIELD_ATTRIBUTES)

REQUIRED_FIELDS: Tuple[str, ...] = ("port", "terminal", "operation")

# Operations the extractors are allowed to produce; Unknown is never assigned
EXTRACTED_OPERATIONS: Tuple[Operation, ...] = (Operation.LOAD, Operation.DISCHARGE, Operation.BUNKER)

NUMERIC_LIKE_FIELDS: Tuple[str, ...] = (
    "waterDensity",
    "maxDraftMeters",
    "loaMeters",
    "beamMeters",
    "maxDwtMt",
    "airDraftMeters",
    "minFreeboardMeters",
    "loadRatePerDayMt",
    "dischargeRatePerDayMt",
)

SUMMARY_FIELDS: Tuple[str, ...] = (
    "id",
    "createdAt",
    "port",
    "terminal",
    "operation",
    "cargo",
    "waterDensity",
    "maxDraftMeters",
    "maxDraftNotes",
    "loadRatePerDayMt",
    "dischargeRatePerDayMt",
    "specialRestrictions",
)
