"""Producer model adapters."""

from dagflow.adapters.base import BaseAdapter, ProducerError
from dagflow.adapters.openai_adapter import DagPlannerAdapter, OpenAIAdapter

__all__ = [
    "BaseAdapter",
    "DagPlannerAdapter",
    "OpenAIAdapter",
    "ProducerError",
]
