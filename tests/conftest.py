"""Shared fixtures for dagflow tests."""

import pytest

from dagflow.models import Catalog, CatalogRecord, DagEdge, DagGraph, DagNode, LayoutDirection

CATALOG_RECORDS = [
    {"name": "trigger", "label": "Manual Trigger", "type": "trigger"},
    {"name": "webhook", "label": "Webhook", "type": "webhook"},
    {"name": "scheduler", "label": "Scheduler", "type": "scheduler"},
    {"name": "process", "label": "Process", "type": "action"},
    {"name": "email", "label": "Send Email", "type": "action"},
]


def make_graph(
    node_ids: list[str],
    edges: list[tuple[str, str]],
    direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
) -> DagGraph:
    """Build a graph from node ids and (source, target) pairs."""
    return DagGraph(
        nodes=[DagNode(id=node_id, label=node_id.title()) for node_id in node_ids],
        edges=[
            DagEdge(id=f"e-{source}-{target}", source=source, target=target)
            for source, target in edges
        ],
        direction=direction,
    )


@pytest.fixture
def catalog_records() -> list[dict]:
    """Raw catalog records as served by the catalog source."""
    return [dict(r) for r in CATALOG_RECORDS]


@pytest.fixture
def catalog() -> Catalog:
    """A loaded catalog with three entry kinds and two actions."""
    return Catalog.from_records(CatalogRecord(**r) for r in CATALOG_RECORDS)


@pytest.fixture
def accepted_candidate() -> DagGraph:
    """Two-node candidate whose first node is a trigger."""
    return DagGraph(
        nodes=[
            DagNode(id="trigger_1", label="Start"),
            DagNode(id="process_1", label="Do work"),
        ],
        edges=[DagEdge(id="e1", source="trigger_1", target="process_1")],
        direction=LayoutDirection.LEFT_TO_RIGHT,
    )


@pytest.fixture
def rejected_candidate() -> DagGraph:
    """Candidate whose first node is an action, not an entry kind."""
    return DagGraph(
        nodes=[
            DagNode(id="process_1", label="Do work"),
            DagNode(id="email_1", label="Notify"),
        ],
        edges=[DagEdge(id="e1", source="process_1", target="email_1")],
    )
