"""
Domain models for the conversation engine.

Messages are immutable once created; the engine only ever appends them to
the history. IntakeRecord is built up across the intake steps.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Sender(str, Enum):
    """Author of a chat message."""
    USER = "user"
    BOT = "bot"


class Priority(str, Enum):
    """Ticket priority collected during intake."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """A single chat message."""
    model_config = ConfigDict(frozen=True)

    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_user(cls, text: str) -> "Message":
        return cls(text=text, sender=Sender.USER)

    @classmethod
    def from_bot(cls, text: str) -> "Message":
        return cls(text=text, sender=Sender.BOT)


class IntakeRecord(BaseModel):
    """Ticket fields collected by the intake dialogue."""
    description: str
    department: Optional[str] = None
    priority: Priority = Priority.LOW
    scope: Optional[str] = None
    ticket_number: Optional[str] = None

    def to_payload(self) -> dict:
        """Body for the ticket creation endpoint."""
        return {
            "description": self.description,
            "department": self.department,
            "priority": self.priority.value,
            "scope": self.scope,
        }


class ConversationState(BaseModel):
    """Read-only snapshot of a conversation exposed to the UI."""
    history: List[Message]
    is_loading: bool
    is_open: bool
    intake_in_progress: bool
    intake_step: int = 0
    intake_record: Optional[IntakeRecord] = None
