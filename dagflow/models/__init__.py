"""Pydantic models for dagflow."""

from dagflow.models.catalog import (
    Catalog,
    CatalogEntry,
    CatalogRecord,
    catalog_key,
)
from dagflow.models.chat import ChatMessage
from dagflow.models.graph import (
    DagEdge,
    DagGraph,
    DagNode,
    LayoutDirection,
    Port,
    Position,
)
from dagflow.models.state import PipelineResult, PipelineState
from dagflow.models.wire import (
    WireEdge,
    WireGraph,
    WireNode,
    WireNodeData,
    from_graph,
    to_graph,
    to_payload,
)

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogRecord",
    "ChatMessage",
    "DagEdge",
    "DagGraph",
    "DagNode",
    "LayoutDirection",
    "PipelineResult",
    "PipelineState",
    "Port",
    "Position",
    "WireEdge",
    "WireGraph",
    "WireNode",
    "WireNodeData",
    "catalog_key",
    "from_graph",
    "to_graph",
    "to_payload",
]
