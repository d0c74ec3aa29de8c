"""Conditional edge logic for the state machine."""

from typing import Literal

from dagflow.models import PipelineState


def route_after_validation(state: PipelineState) -> Literal["sanitize", "fallback"]:
    """Route accepted candidates to sanitization and rejected ones to the fallback.

    Args:
        state: Current pipeline state.

    Returns:
        Next node to execute.
    """
    if state.accepted:
        return "sanitize"
    return "fallback"
