"""
HTTP client for ticket creation and lookup.
"""
import logging
from typing import Optional

import httpx

from stackit_assistant.clients.http import AsyncHttpClient, build_headers, error_message
from stackit_assistant.clients.interfaces import TicketClient, TicketReceipt
from stackit_assistant.config import settings
from stackit_assistant.errors import AuthenticationRequiredError, TicketSubmissionError
from stackit_assistant.models import IntakeRecord

logger = logging.getLogger(__name__)


class TicketSubmissionClient(TicketClient):
    """
    Creates tickets through `POST {api_url}/tickets`.
    
    Every call needs a bearer token. This client never logs in on the
    user's behalf, so a missing token fails before any request is made.
    """
    
    def __init__(self, http: AsyncHttpClient, tickets_path: Optional[str] = None):
        self.http = http
        self.tickets_path = (tickets_path or settings.tickets_path).rstrip("/")
    
    async def submit(self, record: IntakeRecord, auth_token: Optional[str]) -> TicketReceipt:
        if not auth_token:
            raise AuthenticationRequiredError("Authentication required to create a support ticket")
        
        body = await self._call(
            "POST",
            self.tickets_path,
            auth_token,
            "Error creating support ticket",
            json=record.to_payload()
        )
        number = body.get("ticketNumber")
        return TicketReceipt(
            ticket_number=str(number) if number else None,
            status=body.get("status"),
            raw=body
        )
    
    async def get_status(self, ticket_id: str, auth_token: Optional[str]) -> TicketReceipt:
        if not auth_token:
            raise AuthenticationRequiredError("Authentication required to check ticket status")
        
        body = await self._call(
            "GET",
            f"{self.tickets_path}/{ticket_id}",
            auth_token,
            "Error fetching ticket status"
        )
        return TicketReceipt(
            ticket_number=str(body.get("ticketNumber") or ticket_id),
            status=body.get("status"),
            raw=body
        )
    
    async def _call(self, method: str, path: str, auth_token: str, default_error: str, json=None) -> dict:
        try:
            response = await self.http.request(method, path, json=json, headers=build_headers(auth_token))
        except httpx.HTTPError as e:
            logger.error(f"Ticket API unreachable: {e}")
            raise TicketSubmissionError(default_error) from e
        
        if response.is_error:
            message = error_message(response, default_error)
            logger.error(f"Ticket API error {response.status_code}: {message}")
            raise TicketSubmissionError(message, status_code=response.status_code)
        
        try:
            body = response.json()
        except ValueError as e:
            raise TicketSubmissionError("Ticket service returned malformed JSON") from e
        return body if isinstance(body, dict) else {}
