"""Node implementations for the validate / sanitize / layout state machine."""

from dagflow.layout import layout
from dagflow.models import PipelineState
from dagflow.utils.logger import get_logger
from dagflow.utils.metrics import StageMetrics, StageTimer
from dagflow.validation import check_invariants, fallback_graph, sanitize_with_report, validate

logger = get_logger()


def validate_node(state: PipelineState) -> dict:
    """Stage 1: check that the candidate starts with an entry-kind node."""
    metrics = StageMetrics()
    with StageTimer(metrics, "validate"):
        outcome = validate(state.candidate, state.catalog)

    return {
        "accepted": outcome.accepted,
        "rejection_reason": outcome.reason.value if outcome.reason else None,
        "entry_kind": outcome.entry.kind if outcome.entry else None,
        "stage_timings": metrics.timings,
        "current_stage": "validated" if outcome.accepted else "rejected",
    }


def fallback_node(state: PipelineState) -> dict:
    """Substitute the fixed fallback graph for a rejected candidate.

    The fallback carries its own ports and positions, so it skips the
    sanitize and layout stages.
    """
    metrics = StageMetrics()
    with StageTimer(metrics, "fallback"):
        graph = fallback_graph()

    logger.info(f"Using fallback graph ({state.rejection_reason})")
    return {
        "graph": graph,
        "used_fallback": True,
        "stage_timings": metrics.timings,
        "current_stage": "fallback_complete",
    }


def sanitize_node(state: PipelineState) -> dict:
    """Stage 2: rewrite ports for the effective direction, drop dangling edges."""
    metrics = StageMetrics()
    direction = state.direction or state.candidate.direction
    with StageTimer(metrics, "sanitize"):
        result = sanitize_with_report(state.candidate, direction)

    if result.dropped_edges:
        logger.warning(f"Dropped {len(result.dropped_edges)} dangling edge(s): {result.dropped_edges}")

    return {
        "graph": result.graph,
        "dropped_edges": result.dropped_edges,
        "stage_timings": metrics.timings,
        "current_stage": "sanitized",
    }


def layout_node(state: PipelineState) -> dict:
    """Stage 3: position every node of the sanitized graph."""
    metrics = StageMetrics()
    with StageTimer(metrics, "layout"):
        graph = layout(
            state.graph,
            direction=state.graph.direction,
            node_width=state.node_width,
            node_height=state.node_height,
        )

    report = check_invariants(graph)
    for violation in report.violations:
        logger.warning(f"Invariant {violation.code}: {violation.message}")

    return {
        "graph": graph,
        "stage_timings": metrics.timings,
        "current_stage": "complete",
    }
