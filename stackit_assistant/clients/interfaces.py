"""
Client interfaces for the help-desk backend.
The engine depends on these abstractions, not on the HTTP implementations.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from stackit_assistant.models import IntakeRecord, Message


@dataclass
class AssistantReply:
    """Reply of the conversational AI endpoint."""
    message: str
    create_ticket: bool = False


@dataclass
class TicketReceipt:
    """Result of a ticket creation or lookup call."""
    ticket_number: Optional[str] = None
    status: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class AssistantClient(ABC):
    """
    Conversational AI backend.
    
    Implementations raise RemoteAssistantError on any failure so the
    engine can fall back to the local classifier.
    """
    
    @abstractmethod
    async def send(
        self,
        message: str,
        history: Sequence[Message],
        auth_token: Optional[str] = None
    ) -> AssistantReply:
        """
        Send a user message with the recent transcript.
        
        Args:
            message: The user's message
            history: Previous chat messages for context
            auth_token: Optional bearer token
            
        Returns:
            AssistantReply with the bot text and the create-ticket signal
        """
        pass
    
    @abstractmethod
    async def analyze_issue(self, issue_description: str, auth_token: Optional[str] = None) -> Dict[str, Any]:
        """Ask the backend for suggested solutions to an IT issue."""
        pass


class TicketClient(ABC):
    """Ticket creation and lookup backend."""
    
    @abstractmethod
    async def submit(self, record: IntakeRecord, auth_token: Optional[str]) -> TicketReceipt:
        """Create a ticket from a completed intake record."""
        pass
    
    @abstractmethod
    async def get_status(self, ticket_id: str, auth_token: Optional[str]) -> TicketReceipt:
        """Look up an existing ticket."""
        pass
