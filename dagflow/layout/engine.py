"""Layered (Sugiyama-style) layout of a DAG.

Phases:
  1. Cycle breaking (DFS back edges reversed)
  2. Rank assignment (longest path, bounded)
  3. Long-edge splitting (virtual nodes)
  4. Crossing reduction (barycenter sweeps)
  5. Coordinate assignment and direction mapping

The result depends only on the declared node/edge order, the direction and
the node size; repeated calls give identical coordinates.
"""

from dataclasses import dataclass
from typing import Optional

from dagflow.layout.coordinates import assign_coordinates
from dagflow.layout.ordering import LayeredGraph, order_layers, split_long_edges
from dagflow.layout.ranking import break_cycles, build_digraph, longest_path_ranks
from dagflow.models.graph import DagGraph, LayoutDirection, Position
from dagflow.utils.logger import get_logger

logger = get_logger()

DEFAULT_NODE_WIDTH = 180.0
DEFAULT_NODE_HEIGHT = 60.0


@dataclass
class Layering:
    """Intermediate layering of a graph: ranks and per-rank order."""

    layered: LayeredGraph
    layers: list[list[str]]
    reversed_edges: list[tuple[str, str]]

    @property
    def ranks(self) -> dict[str, int]:
        """Ranks of the real nodes."""
        return {
            node_id: rank
            for node_id, rank in self.layered.ranks.items()
            if not self.layered.is_virtual(node_id)
        }

    def order_of(self, rank: int) -> list[str]:
        """Real node ids of a rank, in layout order."""
        return [n for n in self.layers[rank] if not self.layered.is_virtual(n)]


def compute_layering(graph: DagGraph) -> Layering:
    """Run phases 1-4."""
    dag, reversed_edges = break_cycles(build_digraph(graph))
    ranks = longest_path_ranks(dag)
    layered = split_long_edges(dag, ranks)
    layers = order_layers(layered)
    return Layering(layered=layered, layers=layers, reversed_edges=reversed_edges)


def layout(
    graph: DagGraph,
    direction: Optional[LayoutDirection] = None,
    node_width: float = DEFAULT_NODE_WIDTH,
    node_height: float = DEFAULT_NODE_HEIGHT,
) -> DagGraph:
    """Return a copy of ``graph`` with every node positioned.

    Args:
        graph: Graph to lay out; it is not modified.
        direction: Flow direction, defaults to ``graph.direction``.
        node_width: Node footprint width in pixels.
        node_height: Node footprint height in pixels.

    Returns:
        New graph with ``position`` set on each node and ``direction`` set to
        the direction used. An empty graph is returned unchanged.
    """
    if not graph.nodes:
        return graph

    direction = direction or graph.direction
    layering = compute_layering(graph)
    if layering.reversed_edges:
        logger.debug(f"Layout reversed {len(layering.reversed_edges)} edge(s) to break cycles")

    positions: dict[str, Position] = assign_coordinates(
        layering.layers, layering.layered, direction, node_width, node_height
    )

    nodes = [n.model_copy(update={"position": positions[n.id]}) for n in graph.nodes]
    logger.debug(
        f"Laid out {len(nodes)} nodes in {layering.layered.rank_count} ranks ({direction.value})"
    )
    return graph.model_copy(
        update={"nodes": nodes, "edges": list(graph.edges), "direction": direction}
    )
