"""
Chat endpoints exposing the conversation engine to the UI.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from stackit_assistant.api.schemas import (
    AnalyzeIssueRequest,
    AnalyzeIssueResponse,
    ChatRequest,
    ChatResponse,
    OpenRequest,
    OpenResponse,
)
from stackit_assistant.clients.interfaces import AssistantClient
from stackit_assistant.engine.conversation import ConversationEngine
from stackit_assistant.engine.sessions import SessionRegistry
from stackit_assistant.errors import RemoteAssistantError
from stackit_assistant.models import ConversationState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Token from an `Authorization: Bearer ...` header, if present."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_assistant_client(request: Request) -> AssistantClient:
    return request.app.state.assistant_client


async def get_engine(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry)
) -> ConversationEngine:
    return await registry.get_or_create(session_id)


@router.post("/analyze-issue", response_model=AnalyzeIssueResponse)
async def analyze_issue(
    request: AnalyzeIssueRequest,
    client: AssistantClient = Depends(get_assistant_client),
    token: Optional[str] = Depends(bearer_token)
):
    """Proxy an issue description to the backend's analysis endpoint."""
    try:
        analysis = await client.analyze_issue(request.issue_description, token)
    except RemoteAssistantError as e:
        logger.warning(f"Issue analysis failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return AnalyzeIssueResponse(analysis=analysis)


@router.get("/{session_id}", response_model=ConversationState)
async def get_state(engine: ConversationEngine = Depends(get_engine)):
    return engine.state


@router.post("/{session_id}/messages", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    engine: ConversationEngine = Depends(get_engine),
    token: Optional[str] = Depends(bearer_token)
):
    """Handle one user message and return the bot replies.

    The bearer token only applies to this message; it is never stored on
    the session.
    """
    replies = await engine.send_message(request.text, auth_token=token)
    return ChatResponse(replies=replies, state=engine.state)


@router.post("/{session_id}/reset", response_model=ConversationState)
async def reset_conversation(engine: ConversationEngine = Depends(get_engine)):
    engine.reset_conversation()
    return engine.state


@router.post("/{session_id}/toggle", response_model=OpenResponse)
async def toggle_open(engine: ConversationEngine = Depends(get_engine)):
    return OpenResponse(is_open=engine.toggle_open())


@router.put("/{session_id}/open", response_model=OpenResponse)
async def set_open(request: OpenRequest, engine: ConversationEngine = Depends(get_engine)):
    engine.set_open(request.open)
    return OpenResponse(is_open=engine.is_open)
