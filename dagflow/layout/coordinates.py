"""Coordinate assignment for ordered ranks."""

from dagflow.layout.ordering import LayeredGraph
from dagflow.models.graph import LayoutDirection, Position

# Spacing in pixels, matching dagre's defaults (nodesep, ranksep, edgesep)
NODE_GAP = 50.0
RANK_GAP = 50.0
EDGE_GAP = 10.0


def _cross_centers(layer: list[str], layered: LayeredGraph, cross_size: float) -> tuple[list[float], float]:
    """Centers of a rank's members along the order axis, and the rank's extent.

    Real nodes take ``cross_size`` and are kept ``NODE_GAP`` apart; virtual
    nodes are zero-width and use ``EDGE_GAP``.
    """
    centers: list[float] = []
    cursor = 0.0
    previous_half_gap = 0.0
    for index, node_id in enumerate(layer):
        virtual = layered.is_virtual(node_id)
        size = 0.0 if virtual else cross_size
        half_gap = (EDGE_GAP if virtual else NODE_GAP) / 2
        if index > 0:
            cursor += previous_half_gap + half_gap
        centers.append(cursor + size / 2)
        cursor += size
        previous_half_gap = half_gap
    return centers, cursor


def assign_coordinates(
    layers: list[list[str]],
    layered: LayeredGraph,
    direction: LayoutDirection,
    node_width: float,
    node_height: float,
) -> dict[str, Position]:
    """Top-left positions of the real nodes.

    The rank axis is y for vertical directions and x for horizontal ones;
    each rank is centered on the widest rank along the other axis.
    """
    if direction.is_horizontal:
        rank_size, cross_size = node_width, node_height
    else:
        rank_size, cross_size = node_height, node_width

    placed = [_cross_centers(layer, layered, cross_size) for layer in layers]
    widest = max((extent for _, extent in placed), default=0.0)
    last_rank = len(layers) - 1

    positions: dict[str, Position] = {}
    for rank, (layer, (centers, extent)) in enumerate(zip(layers, placed)):
        offset = (widest - extent) / 2
        step = last_rank - rank if direction.is_reversed else rank
        rank_coord = step * (rank_size + RANK_GAP)
        for node_id, center in zip(layer, centers):
            if layered.is_virtual(node_id):
                continue
            cross_coord = center + offset - cross_size / 2
            if direction.is_horizontal:
                positions[node_id] = Position(x=rank_coord, y=cross_coord)
            else:
                positions[node_id] = Position(x=cross_coord, y=rank_coord)
    return positions
