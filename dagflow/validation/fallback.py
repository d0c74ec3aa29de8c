"""Fallback graph substituted for rejected candidates."""

from dagflow.models.graph import (
    DagEdge,
    DagGraph,
    DagNode,
    LayoutDirection,
    Port,
    Position,
)


def fallback_graph() -> DagGraph:
    """Minimal start -> process -> end chain.

    Ports follow left-to-right flow and positions are the ones the layout
    engine computes for the default 180x60 node size, so the value is ready
    for rendering as is.
    """
    return DagGraph(
        nodes=[
            DagNode(
                id="start",
                label="Start Task",
                entry_role=True,
                source_port=Port.RIGHT,
                position=Position(x=0, y=0),
            ),
            DagNode(
                id="process",
                label="Process Task",
                description="Handle user request",
                source_port=Port.RIGHT,
                target_port=Port.LEFT,
                position=Position(x=230, y=0),
            ),
            DagNode(
                id="end",
                label="Complete Task",
                source_port=Port.RIGHT,
                target_port=Port.LEFT,
                position=Position(x=460, y=0),
            ),
        ],
        edges=[
            DagEdge(
                id="edge-start-process",
                source="start",
                target="process",
                source_port=Port.RIGHT,
                target_port=Port.LEFT,
            ),
            DagEdge(
                id="edge-process-end",
                source="process",
                target="end",
                source_port=Port.RIGHT,
                target_port=Port.LEFT,
            ),
        ],
        direction=LayoutDirection.LEFT_TO_RIGHT,
    )
