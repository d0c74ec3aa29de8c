"""API routes for dagflow."""

import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from dagflow.adapters import DagPlannerAdapter, ProducerError
from dagflow.api.handlers import session_manager
from dagflow.catalog import CatalogUnavailableError, get_catalog_gateway
from dagflow.graph import run_pipeline
from dagflow.models import (
    Catalog,
    ChatMessage,
    LayoutDirection,
    PipelineResult,
    WireGraph,
    from_graph,
    to_graph,
)
from dagflow.utils.config import get_settings
from dagflow.utils.logger import get_logger

logger = get_logger()

router = APIRouter(prefix="/api", tags=["dagflow"])


# Request/Response models
class ApiModel(BaseModel):
    """Base for camelCase request and response bodies."""

    model_config = ConfigDict(populate_by_name=True)


class GraphRequest(ApiModel):
    """A candidate graph to validate, sanitize and lay out."""

    graph: WireGraph = Field(..., description="Candidate graph in wire form")
    direction: Optional[str] = Field(default=None, description="TB, LR, BT or RL")
    node_width: Optional[float] = Field(default=None, gt=0, alias="nodeWidth")
    node_height: Optional[float] = Field(default=None, gt=0, alias="nodeHeight")
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class AnalyzeRequest(ApiModel):
    """A conversation for the planner to turn into a graph."""

    messages: list[ChatMessage] = Field(..., min_length=1)
    direction: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class GraphResponse(ApiModel):
    """The graph to render plus how the pipeline got there."""

    session_id: str = Field(..., alias="sessionId")
    graph: WireGraph
    accepted: bool
    rejection_reason: Optional[str] = Field(default=None, alias="rejectionReason")
    used_fallback: bool = Field(default=False, alias="usedFallback")
    dropped_edges: list[str] = Field(default_factory=list, alias="droppedEdges")
    stage_timings: dict[str, float] = Field(default_factory=dict, alias="stageTimings")
    superseded: bool = False


class CatalogResponse(ApiModel):
    """The loaded catalog."""

    entries: list[dict[str, str]]
    entry_kinds: list[str] = Field(..., alias="entryKinds")
    count: int


def get_planner() -> DagPlannerAdapter:
    """Get the planner adapter."""
    return DagPlannerAdapter()


async def _load_catalog() -> Catalog:
    """Load the catalog off the event loop, mapping failure to 503."""
    try:
        return await asyncio.to_thread(get_catalog_gateway().load)
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail={"code": e.code, "message": str(e)})


def _catalog_response(catalog: Catalog) -> CatalogResponse:
    return CatalogResponse(
        entries=catalog.records(),
        entry_kinds=sorted(catalog.entry_kinds),
        count=len(catalog),
    )


def _parse_direction(value: Optional[str]) -> Optional[LayoutDirection]:
    return LayoutDirection.parse(value) if value else None


async def _run_for_session(
    session_id: Optional[str],
    candidate: WireGraph,
    catalog: Catalog,
    direction: Optional[LayoutDirection],
    node_width: float,
    node_height: float,
    generation: Optional[int] = None,
) -> GraphResponse:
    """Run the pipeline in a worker thread and record the result for the session."""
    if generation is None:
        session_id, generation = await session_manager.begin(session_id)

    result: PipelineResult = await asyncio.to_thread(
        run_pipeline,
        to_graph(candidate),
        catalog,
        direction,
        node_width,
        node_height,
    )
    kept = await session_manager.complete(session_id, generation, result)

    return GraphResponse(
        session_id=session_id,
        graph=from_graph(result.graph),
        accepted=result.accepted,
        rejection_reason=result.rejection_reason,
        used_fallback=result.used_fallback,
        dropped_edges=result.dropped_edges,
        stage_timings=result.stage_timings,
        superseded=not kept,
    )


@router.get("/catalog", response_model=CatalogResponse, response_model_by_alias=True)
async def get_catalog():
    """Return the node catalog, fetching it on first use."""
    catalog = await _load_catalog()
    return _catalog_response(catalog)


@router.post("/catalog/refresh", response_model=CatalogResponse, response_model_by_alias=True)
async def refresh_catalog():
    """Re-fetch the node catalog."""
    try:
        catalog = await asyncio.to_thread(get_catalog_gateway().refresh)
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail={"code": e.code, "message": str(e)})
    logger.info(f"Catalog refreshed: {len(catalog)} entries")
    return _catalog_response(catalog)


@router.post(
    "/graph",
    response_model=GraphResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def process_graph(request: GraphRequest):
    """Validate, sanitize and lay out a candidate graph."""
    settings = get_settings()
    catalog = await _load_catalog()

    return await _run_for_session(
        request.session_id,
        request.graph,
        catalog,
        _parse_direction(request.direction),
        request.node_width or settings.node_width,
        request.node_height or settings.node_height,
    )


@router.post(
    "/analyze",
    response_model=GraphResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def analyze(request: AnalyzeRequest):
    """Ask the planner for a graph and run it through the pipeline."""
    settings = get_settings()
    catalog = await _load_catalog()
    direction = _parse_direction(request.direction)

    session_id, generation = await session_manager.begin(request.session_id)
    logger.info(f"[{session_id}] Analyzing conversation of {len(request.messages)} message(s)")

    try:
        candidate = await get_planner().propose_graph(
            request.messages,
            catalog,
            direction or LayoutDirection.LEFT_TO_RIGHT,
        )
    except ProducerError as e:
        logger.error(f"[{session_id}] Planner failed: {e}")
        raise HTTPException(status_code=502, detail={"code": e.code, "message": str(e)})

    return await _run_for_session(
        session_id,
        candidate,
        catalog,
        direction,
        settings.node_width,
        settings.node_height,
        generation=generation,
    )


@router.get(
    "/sessions/{session_id}/graph",
    response_model=GraphResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_session_graph(session_id: str):
    """Return the latest kept graph of a session."""
    result = session_manager.latest(session_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No graph for session {session_id}")

    return GraphResponse(
        session_id=session_id,
        graph=from_graph(result.graph),
        accepted=result.accepted,
        rejection_reason=result.rejection_reason,
        used_fallback=result.used_fallback,
        dropped_edges=result.dropped_edges,
        stage_timings=result.stage_timings,
    )


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """Forget a session and its graph."""
    deleted = await session_manager.delete_session(session_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"deleted": session_id}
