"""State models for the langgraph pipeline."""

from typing import Annotated, Optional

from pydantic import BaseModel, Field

from dagflow.models.catalog import Catalog
from dagflow.models.graph import DagGraph, LayoutDirection


def merge_timings(existing: dict[str, float], new: dict[str, float]) -> dict[str, float]:
    """Merge per-stage timings, later stages adding their own keys."""
    return {**existing, **new}


class PipelineState(BaseModel):
    """The state object for the validate / sanitize / layout state machine."""

    # Input
    candidate: DagGraph = Field(..., description="Graph proposed by the producer")
    catalog: Catalog = Field(..., description="Catalog used to check the entry node")
    direction: Optional[LayoutDirection] = Field(
        default=None, description="Overrides the candidate's direction when set"
    )
    node_width: float = Field(default=180, gt=0)
    node_height: float = Field(default=60, gt=0)

    # Validation outcome
    accepted: Optional[bool] = None
    rejection_reason: Optional[str] = None
    entry_kind: Optional[str] = None

    # Output
    graph: Optional[DagGraph] = Field(default=None, description="Result handed to the consumer")
    used_fallback: bool = False
    dropped_edges: list[str] = Field(default_factory=list)

    # Observability
    stage_timings: Annotated[dict[str, float], merge_timings] = Field(default_factory=dict)
    current_stage: str = Field(default="start")


class PipelineResult(BaseModel):
    """What the pipeline hands to the rendering surface."""

    graph: DagGraph
    accepted: bool
    rejection_reason: Optional[str] = None
    used_fallback: bool = False
    dropped_edges: list[str] = Field(default_factory=list)
    stage_timings: dict[str, float] = Field(default_factory=dict)
