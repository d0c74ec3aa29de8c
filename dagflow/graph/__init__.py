"""LangGraph state machine for the graph pipeline."""

from dagflow.graph.graph import create_pipeline, run_pipeline
from dagflow.graph.nodes import (
    fallback_node,
    layout_node,
    sanitize_node,
    validate_node,
)

__all__ = [
    "create_pipeline",
    "run_pipeline",
    "validate_node",
    "fallback_node",
    "sanitize_node",
    "layout_node",
]
