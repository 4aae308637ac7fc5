"""Conversation data models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Turn:
    """Represents a single persisted user/assistant exchange."""
    user_id: str
    session_id: str
    user_input: str
    assistant_raw: Optional[str]  # raw model output, stored verbatim
    created_at: Optional[datetime] = None  # assigned by the store


@dataclass(frozen=True)
class ContextPair:
    """A historical exchange as handed to the model."""
    user: str
    assistant: str
