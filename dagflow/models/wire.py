"""Wire format shared with producers and renderers.

The shape follows React Flow node/edge objects. These models accept what an
untrusted producer may send; :func:`to_graph` is the only way into the
strict :class:`~dagflow.models.graph.DagGraph` used by the core.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from dagflow.models.graph import (
    DagEdge,
    DagGraph,
    DagNode,
    LayoutDirection,
    Port,
    Position,
)


class WireModel(BaseModel):
    """Base for camelCase wire models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WirePosition(WireModel):
    x: float
    y: float


class WireNodeData(WireModel):
    label: str
    description: Optional[str] = None
    source_position: Optional[str] = Field(default=None, alias="sourcePosition")
    target_position: Optional[str] = Field(default=None, alias="targetPosition")


class WireNode(WireModel):
    id: str
    type: str = "default"
    data: WireNodeData
    position: Optional[WirePosition] = None
    source_position: Optional[str] = Field(default=None, alias="sourcePosition")
    target_position: Optional[str] = Field(default=None, alias="targetPosition")
    entry_role: Optional[bool] = Field(default=None, alias="entryRole")


class WireEdge(WireModel):
    id: str
    source: str
    target: str
    animated: bool = True
    type: str = "smoothstep"
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")
    style: Optional[dict[str, Any]] = None


class WireGraph(WireModel):
    nodes: list[WireNode] = Field(default_factory=list)
    edges: list[WireEdge] = Field(default_factory=list)
    layout_direction: Optional[str] = Field(default=None, alias="layoutDirection")


def _node_to_graph(node: WireNode) -> DagNode:
    position = None
    if node.position is not None:
        position = Position(x=node.position.x, y=node.position.y)
    return DagNode(
        id=node.id,
        kind=node.type or "default",
        label=node.data.label,
        description=node.data.description,
        entry_role=bool(node.entry_role),
        source_port=Port.parse(node.source_position or node.data.source_position),
        target_port=Port.parse(node.target_position or node.data.target_position),
        position=position,
    )


def _edge_to_graph(edge: WireEdge) -> DagEdge:
    return DagEdge(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        source_port=Port.parse(edge.source_handle),
        target_port=Port.parse(edge.target_handle),
        animated=edge.animated,
        edge_type=edge.type,
        style_hint=edge.style,
    )


def to_graph(wire: WireGraph) -> DagGraph:
    """Convert a wire graph into the core model.

    Unrecognized port strings are dropped and an unrecognized direction
    becomes left-to-right.
    """
    return DagGraph(
        nodes=[_node_to_graph(n) for n in wire.nodes],
        edges=[_edge_to_graph(e) for e in wire.edges],
        direction=LayoutDirection.parse(wire.layout_direction),
    )


def _port_value(port: Optional[Port]) -> Optional[str]:
    return port.value if port is not None else None


def from_graph(graph: DagGraph) -> WireGraph:
    """Convert a core graph into its wire form."""
    nodes = []
    for node in graph.nodes:
        source = _port_value(node.source_port)
        target = _port_value(node.target_port)
        nodes.append(
            WireNode(
                id=node.id,
                type=node.kind,
                data=WireNodeData(
                    label=node.label,
                    description=node.description,
                    source_position=source,
                    target_position=target,
                ),
                position=(
                    WirePosition(x=node.position.x, y=node.position.y)
                    if node.position is not None
                    else None
                ),
                source_position=source,
                target_position=target,
                entry_role=node.entry_role,
            )
        )
    edges = [
        WireEdge(
            id=edge.id,
            source=edge.source,
            target=edge.target,
            animated=edge.animated,
            type=edge.edge_type,
            source_handle=_port_value(edge.source_port),
            target_handle=_port_value(edge.target_port),
            style=edge.style_hint,
        )
        for edge in graph.edges
    ]
    return WireGraph(nodes=nodes, edges=edges, layout_direction=graph.direction.value)


def to_payload(graph: DagGraph) -> dict[str, Any]:
    """JSON-ready dict of a graph in wire form."""
    return from_graph(graph).model_dump(by_alias=True, exclude_none=True)
