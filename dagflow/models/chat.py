"""Conversation turns sent to the producer."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """One turn of the user's conversation with the planner."""

    role: Literal["user", "assistant", "system"] = "user"
    content: str = Field(..., min_length=1)
