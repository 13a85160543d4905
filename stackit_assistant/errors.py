"""
Exception hierarchy for the assistant's external collaborators.
"""
from typing import Optional


class AssistantError(Exception):
    """Base class for failures raised by the assistant's clients."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteAssistantError(AssistantError):
    """The conversational AI endpoint failed, timed out or is not configured."""


class TicketSubmissionError(AssistantError):
    """The ticket endpoint failed or could not be reached."""


class AuthenticationRequiredError(AssistantError):
    """A ticket operation was attempted without an auth token."""
