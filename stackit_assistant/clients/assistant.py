"""
HTTP client for the help-desk conversational AI endpoint.
"""
import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from stackit_assistant.clients.http import AsyncHttpClient, build_headers, error_message
from stackit_assistant.clients.interfaces import AssistantClient, AssistantReply
from stackit_assistant.config import settings
from stackit_assistant.errors import RemoteAssistantError
from stackit_assistant.models import Message

logger = logging.getLogger(__name__)


class RemoteAssistantClient(AssistantClient):
    """
    Calls `POST {api_url}/chatbot` with the message and a bounded transcript.
    
    Only the last `history_window` messages are sent so request size stays
    flat as a conversation grows.
    """
    
    def __init__(
        self,
        http: AsyncHttpClient,
        history_window: Optional[int] = None,
        assistant_path: Optional[str] = None,
        analyze_path: Optional[str] = None
    ):
        self.http = http
        self.history_window = history_window if history_window is not None else settings.history_window
        self.assistant_path = assistant_path or settings.assistant_path
        self.analyze_path = analyze_path or settings.analyze_path
    
    def _window(self, history: Sequence[Message]) -> list:
        if self.history_window <= 0:
            return []
        return [m.model_dump(mode="json") for m in list(history)[-self.history_window:]]
    
    async def send(
        self,
        message: str,
        history: Sequence[Message],
        auth_token: Optional[str] = None
    ) -> AssistantReply:
        payload = {"message": message, "history": self._window(history)}
        body = await self._post(
            self.assistant_path,
            payload,
            auth_token,
            "Error communicating with chatbot service"
        )
        
        if not isinstance(body, dict) or not isinstance(body.get("message"), str):
            raise RemoteAssistantError("Chatbot service returned an invalid reply")
        
        return AssistantReply(
            message=body["message"],
            create_ticket=bool(body.get("createTicket", False))
        )
    
    async def analyze_issue(self, issue_description: str, auth_token: Optional[str] = None) -> Dict[str, Any]:
        body = await self._post(
            self.analyze_path,
            {"issueDescription": issue_description},
            auth_token,
            "Error analyzing IT issue"
        )
        if not isinstance(body, dict):
            raise RemoteAssistantError("Issue analysis returned an invalid reply")
        return body
    
    async def _post(self, path: str, payload: dict, auth_token: Optional[str], default_error: str) -> Any:
        try:
            response = await self.http.post(path, json=payload, headers=build_headers(auth_token))
        except httpx.HTTPError as e:
            logger.warning(f"Chatbot API unreachable: {e}")
            raise RemoteAssistantError(default_error) from e
        
        if response.is_error:
            message = error_message(response, default_error)
            logger.warning(f"Chatbot API error {response.status_code}: {message}")
            raise RemoteAssistantError(message, status_code=response.status_code)
        
        try:
            return response.json()
        except ValueError as e:
            raise RemoteAssistantError("Chatbot service returned malformed JSON") from e
