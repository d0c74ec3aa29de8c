"""Port sanitizer for accepted graphs.

Ports are always computed here from the layout direction and the node's
role. Ports supplied by the producer are always overwritten.
"""

from dataclasses import dataclass, field
from typing import Optional

from dagflow.models.graph import DagEdge, DagGraph, DagNode, LayoutDirection, Port
from dagflow.utils.logger import get_logger

logger = get_logger()

# direction -> (leading, trailing); edges enter on the leading side and leave
# on the trailing side
PORTS_BY_DIRECTION: dict[LayoutDirection, tuple[Port, Port]] = {
    LayoutDirection.TOP_TO_BOTTOM: (Port.TOP, Port.BOTTOM),
    LayoutDirection.LEFT_TO_RIGHT: (Port.LEFT, Port.RIGHT),
    LayoutDirection.BOTTOM_TO_TOP: (Port.BOTTOM, Port.TOP),
    LayoutDirection.RIGHT_TO_LEFT: (Port.RIGHT, Port.LEFT),
}


def ports_for(direction: LayoutDirection) -> tuple[Port, Port]:
    """(leading, trailing) ports for a direction."""
    return PORTS_BY_DIRECTION[direction]


@dataclass
class SanitizationResult:
    """Sanitized graph with what changed on the way."""

    graph: DagGraph
    dropped_edges: list[str] = field(default_factory=list)
    overwritten_ports: int = 0

    @property
    def was_modified(self) -> bool:
        return bool(self.dropped_edges) or self.overwritten_ports > 0


def _sanitize_node(node: DagNode, index: int, leading: Port, trailing: Port) -> DagNode:
    is_entry = index == 0
    return node.model_copy(
        update={
            "entry_role": is_entry,
            "source_port": trailing,
            # The entry node is a pure source
            "target_port": None if is_entry else leading,
        }
    )


def sanitize_with_report(
    graph: DagGraph,
    direction: Optional[LayoutDirection] = None,
) -> SanitizationResult:
    """Normalize ports and drop edges referencing unknown nodes.

    Args:
        graph: An accepted graph.
        direction: Overrides ``graph.direction`` when given.

    Returns:
        SanitizationResult holding a new graph; the input is not modified.
    """
    direction = direction or graph.direction
    leading, trailing = ports_for(direction)
    overwritten = 0

    nodes: list[DagNode] = []
    for index, node in enumerate(graph.nodes):
        clean = _sanitize_node(node, index, leading, trailing)
        if (node.source_port, node.target_port) != (clean.source_port, clean.target_port):
            overwritten += 1
        nodes.append(clean)

    node_ids = {n.id for n in nodes}
    edges: list[DagEdge] = []
    dropped: list[str] = []
    for edge in graph.edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            logger.warning(
                f"Dropping edge {edge.id!r}: dangling reference "
                f"{edge.source!r} -> {edge.target!r}"
            )
            dropped.append(edge.id)
            continue
        if (edge.source_port, edge.target_port) != (trailing, leading):
            overwritten += 1
        edges.append(
            edge.model_copy(update={"source_port": trailing, "target_port": leading})
        )

    sanitized = DagGraph(nodes=nodes, edges=edges, direction=direction)
    logger.info(
        f"Sanitized DAG ({direction.value}): {len(nodes)} nodes / {len(edges)} edges, "
        f"{len(dropped)} dropped"
    )
    return SanitizationResult(graph=sanitized, dropped_edges=dropped, overwritten_ports=overwritten)


def sanitize(graph: DagGraph, direction: Optional[LayoutDirection] = None) -> DagGraph:
    """Return ``graph`` with every port engine-computed for ``direction``."""
    return sanitize_with_report(graph, direction).graph
