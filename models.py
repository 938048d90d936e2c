"""Models for lazy sequences (filter states, settings)."""

from enum import Enum
from pydantic import BaseModel, Field, field_validator, ConfigDict


class FilterState(str, Enum):
    """Per-node filter verdict."""
    UNKNOWN = "unknown"
    FILTERED = "filtered"
    KEPT = "kept"


class MapFilterPropagation(str, Enum):
    """How map() carries the source node's filter verdict."""
    SNAPSHOT = "snapshot"   # verdict as cached when map() is called
    DEFERRED = "deferred"   # verdict resolved from the source on first query


class SequenceSettings(BaseModel):
    """Process-wide settings for LazySequence rendering and tracing."""
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    unevaluated_marker: str = Field(
        default="?",
        description="Rendered in place of a head or tail not yet evaluated"
    )
    empty_marker: str = Field(
        default="-",
        description="Rendered for the empty terminal"
    )
    separator: str = Field(
        default=",",
        description="Separator between rendered nodes"
    )
    trace_evaluations: bool = Field(
        default=False,
        description="Log every thunk and predicate resolution at debug level"
    )
    map_filter_propagation: MapFilterPropagation = Field(
        default=MapFilterPropagation.SNAPSHOT,
        description="Filter verdict propagation used by map()"
    )

    @field_validator('unevaluated_marker', 'empty_marker', 'separator')
    @classmethod
    def validate_marker(cls, v):
        """Rendering tokens must be visible."""
        if not v:
            raise ValueError("Rendering markers must not be empty")
        return v
