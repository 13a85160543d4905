"""Pytest configuration and fixtures."""

from typing import Callable, List

import httpx
import pytest
from unittest.mock import AsyncMock, Mock

from stackit_assistant.clients.http import AsyncHttpClient
from stackit_assistant.clients.interfaces import AssistantClient, TicketClient, TicketReceipt
from stackit_assistant.engine.conversation import ConversationEngine
from stackit_assistant.errors import RemoteAssistantError

API_URL = "http://helpdesk.test/api"


# Collaborator doubles
@pytest.fixture
def assistant_client():
    """Assistant that is unreachable unless a test says otherwise."""
    client = Mock(spec=AssistantClient)
    client.send = AsyncMock(side_effect=RemoteAssistantError("Error communicating with chatbot service"))
    client.analyze_issue = AsyncMock(return_value={"solutions": ["Restart the router"]})
    return client


@pytest.fixture
def ticket_client():
    """Ticket backend that accepts every submission."""
    client = Mock(spec=TicketClient)
    client.submit = AsyncMock(return_value=TicketReceipt(ticket_number="INC424242"))
    client.get_status = AsyncMock(
        return_value=TicketReceipt(ticket_number="INC123456", status="In Progress")
    )
    return client


@pytest.fixture
def make_engine(assistant_client, ticket_client) -> Callable[..., ConversationEngine]:
    """Factory for engines wired to the doubles above."""

    def create_engine(**kwargs) -> ConversationEngine:
        kwargs.setdefault("auth_token", "user-token")
        return ConversationEngine(
            assistant_client=assistant_client,
            ticket_client=ticket_client,
            **kwargs
        )

    return create_engine


# HTTP plumbing
@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def mock_http(recorded_requests):
    """Build an AsyncHttpClient answering through a handler function."""

    def build(handler, max_attempts: int = 1) -> AsyncHttpClient:
        def recording_handler(request: httpx.Request):
            recorded_requests.append(request)
            return handler(request)

        return AsyncHttpClient(
            base_url=API_URL,
            timeout=5,
            max_attempts=max_attempts,
            transport=httpx.MockTransport(recording_handler)
        )

    return build
