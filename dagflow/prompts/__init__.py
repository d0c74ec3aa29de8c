"""Prompts for the producer."""

from dagflow.prompts.planner import CATALOG_PROMPT, PLANNER_SYSTEM_PROMPT, format_entry_kinds

__all__ = [
    "CATALOG_PROMPT",
    "PLANNER_SYSTEM_PROMPT",
    "format_entry_kinds",
]
