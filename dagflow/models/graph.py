"""Graph models: nodes, edges, ports and layout direction."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Port(str, Enum):
    """Attachment point on a node's boundary."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @classmethod
    def parse(cls, value: Any) -> Optional["Port"]:
        """Parse a producer-supplied port, discarding anything unrecognized."""
        if isinstance(value, Port):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_DIRECTION_ALIASES = {
    "top-to-bottom": "TB",
    "left-to-right": "LR",
    "bottom-to-top": "BT",
    "right-to-left": "RL",
}


class LayoutDirection(str, Enum):
    """Primary axis and orientation of the layout flow."""

    TOP_TO_BOTTOM = "TB"
    LEFT_TO_RIGHT = "LR"
    BOTTOM_TO_TOP = "BT"
    RIGHT_TO_LEFT = "RL"

    @classmethod
    def parse(cls, value: Any) -> "LayoutDirection":
        """Parse a direction token; anything unrecognized means left-to-right."""
        if isinstance(value, LayoutDirection):
            return value
        if not isinstance(value, str):
            return cls.LEFT_TO_RIGHT
        token = value.strip()
        token = _DIRECTION_ALIASES.get(token.lower(), token).upper()
        try:
            return cls(token)
        except ValueError:
            return cls.LEFT_TO_RIGHT

    @property
    def is_horizontal(self) -> bool:
        """Whether ranks advance along the x axis."""
        return self in (LayoutDirection.LEFT_TO_RIGHT, LayoutDirection.RIGHT_TO_LEFT)

    @property
    def is_reversed(self) -> bool:
        """Whether ranks advance towards smaller coordinates."""
        return self in (LayoutDirection.BOTTOM_TO_TOP, LayoutDirection.RIGHT_TO_LEFT)


class Position(BaseModel):
    """Top-left corner of a node, in pixels."""

    x: float
    y: float


class DagNode(BaseModel):
    """A subtask in the graph."""

    id: str = Field(..., description="Caller-assigned node id")
    kind: str = Field(default="default", description="Node kind tag")
    label: str = Field(..., description="Display text")
    description: Optional[str] = Field(default=None, description="Longer explanation")
    entry_role: bool = Field(default=False, description="True only for the start node")
    source_port: Optional[Port] = None
    target_port: Optional[Port] = None
    position: Optional[Position] = None


class DagEdge(BaseModel):
    """A dependency between two subtasks."""

    id: str
    source: str
    target: str
    source_port: Optional[Port] = None
    target_port: Optional[Port] = None
    animated: bool = True
    edge_type: str = "smoothstep"
    style_hint: Optional[dict[str, Any]] = Field(
        default=None, description="Rendering hint, opaque to validation and layout"
    )


class DagGraph(BaseModel):
    """Ordered nodes and edges plus the layout direction.

    Node order is meaningful: the first node is the entry node, and the
    declared order is the tie-break for layout ordering.
    """

    nodes: list[DagNode] = Field(default_factory=list)
    edges: list[DagEdge] = Field(default_factory=list)
    direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT

    @property
    def entry_node(self) -> Optional[DagNode]:
        """The first node in sequence, if any."""
        return self.nodes[0] if self.nodes else None

    @property
    def node_ids(self) -> set[str]:
        """Ids of all nodes."""
        return {node.id for node in self.nodes}

    def node(self, node_id: str) -> Optional[DagNode]:
        """First node with the given id."""
        return next((n for n in self.nodes if n.id == node_id), None)

    def positions(self) -> dict[str, Position]:
        """Positions addressed by node id, for nodes that have one."""
        return {n.id: n.position for n in self.nodes if n.position is not None}
