"""Main LangGraph definition for the graph pipeline."""

from typing import Optional

from langgraph.graph import END, StateGraph

from dagflow.graph.edges import route_after_validation
from dagflow.graph.nodes import fallback_node, layout_node, sanitize_node, validate_node
from dagflow.models import Catalog, DagGraph, LayoutDirection, PipelineResult, PipelineState
from dagflow.utils.logger import get_logger

logger = get_logger()


def create_pipeline():
    """Create the state machine turning a candidate into a renderable graph.

    The workflow is:
    1. START -> validate (entry node checked against the catalog)
    2. validate -> sanitize (accepted) | fallback (rejected)
    3. sanitize -> layout -> END
    4. fallback -> END (the fallback graph is already positioned)

    Returns:
        Compiled StateGraph ready for execution.
    """
    workflow = StateGraph(PipelineState)

    workflow.add_node("validate", validate_node)
    workflow.add_node("fallback", fallback_node)
    workflow.add_node("sanitize", sanitize_node)
    workflow.add_node("layout", layout_node)

    workflow.set_entry_point("validate")

    workflow.add_conditional_edges(
        "validate",
        route_after_validation,
        {
            "sanitize": "sanitize",
            "fallback": "fallback",
        },
    )

    workflow.add_edge("sanitize", "layout")
    workflow.add_edge("layout", END)
    workflow.add_edge("fallback", END)

    return workflow.compile()


def run_pipeline(
    candidate: DagGraph,
    catalog: Catalog,
    direction: Optional[LayoutDirection] = None,
    node_width: float = 180,
    node_height: float = 60,
) -> PipelineResult:
    """Validate, sanitize and lay out a candidate graph.

    Args:
        candidate: Graph proposed by the producer.
        catalog: Loaded node catalog.
        direction: Layout direction; defaults to the candidate's.
        node_width: Node footprint width.
        node_height: Node footprint height.

    Returns:
        PipelineResult with the graph to render, which is the fallback graph
        when the candidate was rejected.
    """
    logger.info(
        f"Running pipeline for {len(candidate.nodes)} nodes / {len(candidate.edges)} edges"
    )

    initial_state = PipelineState(
        candidate=candidate,
        catalog=catalog,
        direction=direction,
        node_width=node_width,
        node_height=node_height,
    )

    pipeline = create_pipeline()
    final_state_dict = pipeline.invoke(initial_state)

    # Merge with the initial state so fields no stage touched keep their values
    state_data = dict(initial_state)
    state_data.update(final_state_dict)
    final_state = PipelineState(**state_data)

    logger.info(
        f"Pipeline complete - stage: {final_state.current_stage}, "
        f"fallback: {final_state.used_fallback}"
    )
    logger.debug(
        "Stage timings: "
        + ", ".join(f"{stage}={seconds * 1000:.2f}ms" for stage, seconds in final_state.stage_timings.items())
    )

    return PipelineResult(
        graph=final_state.graph,
        accepted=bool(final_state.accepted),
        rejection_reason=final_state.rejection_reason,
        used_fallback=final_state.used_fallback,
        dropped_edges=final_state.dropped_edges,
        stage_timings=final_state.stage_timings,
    )
