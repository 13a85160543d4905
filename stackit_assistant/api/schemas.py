"""
Request/response models for the chat API.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from stackit_assistant.models import ConversationState, Message


class ChatRequest(BaseModel):
    """Inbound user message."""
    text: str = Field(..., min_length=1, max_length=4000, description="User message")


class ChatResponse(BaseModel):
    """Bot messages emitted for the turn plus the resulting state."""
    replies: List[Message]
    state: ConversationState


class OpenRequest(BaseModel):
    open: bool


class OpenResponse(BaseModel):
    is_open: bool


class AnalyzeIssueRequest(BaseModel):
    issue_description: str = Field(..., min_length=1, description="Detailed description of the IT issue")


class AnalyzeIssueResponse(BaseModel):
    analysis: Dict[str, Any]
