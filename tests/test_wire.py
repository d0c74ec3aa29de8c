"""Tests for the wire format."""

from dagflow.models import (
    DagGraph,
    LayoutDirection,
    Port,
    WireGraph,
    from_graph,
    to_graph,
    to_payload,
)
from dagflow.validation import fallback_graph

PRODUCER_PAYLOAD = {
    "nodes": [
        {
            "id": "webhook_1",
            "type": "default",
            "data": {"label": "Receive order", "description": "Incoming webhook"},
            "sourcePosition": "Right",
            "targetPosition": "sideways",
        },
        {
            "id": "email_1",
            "type": "default",
            "data": {"label": "Send receipt", "targetPosition": "left"},
            "position": {"x": 10, "y": 20},
        },
    ],
    "edges": [
        {
            "id": "e1",
            "source": "webhook_1",
            "target": "email_1",
            "animated": True,
            "type": "smoothstep",
            "sourceHandle": "right",
            "targetHandle": "left",
            "style": {"strokeWidth": 2, "stroke": "#999"},
        }
    ],
    "layoutDirection": "TB",
}


class TestToGraph:
    """Tests for converting producer payloads into the core model."""

    def test_parses_producer_payload(self):
        """Test a camelCase payload is converted."""
        graph = to_graph(WireGraph.model_validate(PRODUCER_PAYLOAD))
        first, second = graph.nodes

        assert graph.direction == LayoutDirection.TOP_TO_BOTTOM
        assert first.label == "Receive order"
        assert first.description == "Incoming webhook"
        assert first.source_port == Port.RIGHT
        assert first.target_port is None
        assert second.target_port == Port.LEFT
        assert second.position.x == 10
        assert graph.edges[0].style_hint == {"strokeWidth": 2, "stroke": "#999"}

    def test_unknown_direction_defaults(self):
        """Test a missing or unknown direction means left-to-right."""
        payload = dict(PRODUCER_PAYLOAD, layoutDirection="diagonal")
        assert to_graph(WireGraph.model_validate(payload)).direction == LayoutDirection.LEFT_TO_RIGHT

        payload = {k: v for k, v in PRODUCER_PAYLOAD.items() if k != "layoutDirection"}
        assert to_graph(WireGraph.model_validate(payload)).direction == LayoutDirection.LEFT_TO_RIGHT

    def test_direction_aliases(self):
        """Test long direction names and lower case are accepted."""
        assert LayoutDirection.parse("right-to-left") == LayoutDirection.RIGHT_TO_LEFT
        assert LayoutDirection.parse("bt") == LayoutDirection.BOTTOM_TO_TOP
        assert LayoutDirection.parse(None) == LayoutDirection.LEFT_TO_RIGHT

    def test_empty_payload(self):
        """Test an empty payload gives an empty graph."""
        assert to_graph(WireGraph.model_validate({})) == DagGraph()


class TestFromGraph:
    """Tests for converting the core model into wire form."""

    def test_payload_uses_camel_case(self):
        """Test the payload carries React Flow field names."""
        payload = to_payload(fallback_graph())
        start = payload["nodes"][0]

        assert payload["layoutDirection"] == "LR"
        assert start["sourcePosition"] == "right"
        assert start["data"]["sourcePosition"] == "right"
        assert "targetPosition" not in start
        assert start["entryRole"] is True
        assert start["position"] == {"x": 0.0, "y": 0.0}
        assert payload["edges"][0]["sourceHandle"] == "right"
        assert payload["edges"][0]["targetHandle"] == "left"

    def test_round_trip_keeps_every_field(self):
        """Test graph -> wire -> graph is lossless."""
        graph = fallback_graph()
        graph.edges[0].style_hint = {"stroke": "#f00"}
        graph.nodes[2].kind = "output"

        assert to_graph(from_graph(graph)) == graph

    def test_round_trip_through_json(self):
        """Test the JSON payload parses back to the same graph."""
        graph = fallback_graph()
        payload = to_payload(graph)
        assert to_graph(WireGraph.model_validate(payload)) == graph
