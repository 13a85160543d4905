from stackit_assistant.clients.interfaces import (
    AssistantClient,
    AssistantReply,
    TicketClient,
    TicketReceipt,
)
from stackit_assistant.clients.assistant import RemoteAssistantClient
from stackit_assistant.clients.offline import OfflineAssistantClient, OfflineTicketClient
from stackit_assistant.clients.tickets import TicketSubmissionClient

__all__ = [
    "AssistantClient",
    "AssistantReply",
    "TicketClient",
    "TicketReceipt",
    "RemoteAssistantClient",
    "OfflineAssistantClient",
    "OfflineTicketClient",
    "TicketSubmissionClient",
]
