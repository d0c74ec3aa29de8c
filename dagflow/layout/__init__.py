"""Layered layout engine."""

from dagflow.layout.coordinates import EDGE_GAP, NODE_GAP, RANK_GAP
from dagflow.layout.engine import (
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_WIDTH,
    Layering,
    compute_layering,
    layout,
)
from dagflow.layout.ordering import count_crossings
from dagflow.layout.ranking import rank_nodes

__all__ = [
    "DEFAULT_NODE_HEIGHT",
    "DEFAULT_NODE_WIDTH",
    "EDGE_GAP",
    "Layering",
    "NODE_GAP",
    "RANK_GAP",
    "compute_layering",
    "count_crossings",
    "layout",
    "rank_nodes",
]
