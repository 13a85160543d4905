"""
Clients used when no help-desk backend is configured.
"""
from typing import Any, Dict, Optional, Sequence

from stackit_assistant.clients.interfaces import AssistantClient, AssistantReply, TicketClient, TicketReceipt
from stackit_assistant.errors import AuthenticationRequiredError, RemoteAssistantError, TicketSubmissionError
from stackit_assistant.models import IntakeRecord, Message


class OfflineAssistantClient(AssistantClient):
    """
    Stands in for an unreachable AI backend.
    
    Every call fails, which sends each message down the local classifier
    path without a network round trip.
    """
    
    async def send(
        self,
        message: str,
        history: Sequence[Message],
        auth_token: Optional[str] = None
    ) -> AssistantReply:
        raise RemoteAssistantError("No chatbot endpoint configured")
    
    async def analyze_issue(self, issue_description: str, auth_token: Optional[str] = None) -> Dict[str, Any]:
        raise RemoteAssistantError("No chatbot endpoint configured")


class OfflineTicketClient(TicketClient):
    """
    Ticket backend stand-in for deployments without an api_url.
    
    Submissions fail with TicketSubmissionError, so intake confirms with a
    locally generated ticket number. A missing token is still reported.
    """
    
    async def submit(self, record: IntakeRecord, auth_token: Optional[str]) -> TicketReceipt:
        if not auth_token:
            raise AuthenticationRequiredError("Authentication required to create a support ticket")
        raise TicketSubmissionError("No ticket endpoint configured")
    
    async def get_status(self, ticket_id: str, auth_token: Optional[str]) -> TicketReceipt:
        raise TicketSubmissionError("No ticket endpoint configured")
