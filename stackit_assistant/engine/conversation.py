"""
Conversation orchestrator.

One ConversationEngine per chat session. Each inbound message is routed to
the intake dialogue when one is running, otherwise to the remote assistant
with the keyword classifier as fallback.
"""
import asyncio
import logging
import re
from contextlib import asynccontextmanager
from typing import List, Optional

from stackit_assistant.clients.interfaces import AssistantClient, TicketClient
from stackit_assistant.config import settings
from stackit_assistant.errors import AssistantError, RemoteAssistantError
from stackit_assistant.intake.state_machine import IntakeStateMachine
from stackit_assistant.intent.classifier import IntentClassifier
from stackit_assistant.models import ConversationState, Message, Sender
from stackit_assistant.observability import metrics
from stackit_assistant.utils.text import log_preview
from stackit_assistant.utils.timing import async_timer

logger = logging.getLogger(__name__)

TICKET_REFERENCE = re.compile(r"\bINC\d{6}\b", re.IGNORECASE)

ERROR_MESSAGE = "Sorry, I'm having trouble processing your request. Please try again later."


class ConversationEngine:
    """
    Message-in/message-out chat engine with its own conversation state.
    
    Dependencies are injected so each session can be built with real HTTP
    clients, the offline assistant, or test doubles.
    
    Inbound messages are serialized with a lock: a second send_message waits
    until the first has finished, so intake transitions never interleave.
    """
    
    def __init__(
        self,
        assistant_client: AssistantClient,
        ticket_client: TicketClient,
        classifier: Optional[IntentClassifier] = None,
        auth_token: Optional[str] = None,
        greeting: Optional[str] = None,
        history_window: Optional[int] = None,
        remote_timeout_seconds: Optional[float] = None,
        intake: Optional[IntakeStateMachine] = None
    ):
        self.assistant_client = assistant_client
        self.ticket_client = ticket_client
        self.classifier = classifier or IntentClassifier()
        self.intake = intake or IntakeStateMachine(ticket_client)
        self.auth_token = auth_token
        self.greeting = greeting or settings.greeting_message
        self.history_window = history_window if history_window is not None else settings.history_window
        self.remote_timeout_seconds = (
            remote_timeout_seconds if remote_timeout_seconds is not None
            else settings.remote_timeout_seconds
        )
        
        self.history: List[Message] = [Message.from_bot(self.greeting)]
        self.is_loading = False
        self.is_open = False
        self._lock = asyncio.Lock()
    
    # ------------------------------------------------------------------
    # Read access for the UI
    # ------------------------------------------------------------------
    
    @property
    def intake_in_progress(self) -> bool:
        return self.intake.in_progress
    
    @property
    def state(self) -> ConversationState:
        record = self.intake.record
        return ConversationState(
            history=list(self.history),
            is_loading=self.is_loading,
            is_open=self.is_open,
            intake_in_progress=self.intake_in_progress,
            intake_step=int(self.intake.step),
            intake_record=record.model_copy() if record is not None else None
        )
    
    # ------------------------------------------------------------------
    # UI actions
    # ------------------------------------------------------------------
    
    def reset_conversation(self):
        """Back to the seeded greeting with no intake running."""
        self.history = [Message.from_bot(self.greeting)]
        self.intake.reset()
        logger.info("Conversation reset")
    
    def toggle_open(self) -> bool:
        self.is_open = not self.is_open
        return self.is_open
    
    def set_open(self, is_open: bool):
        self.is_open = bool(is_open)
    
    async def send_message(self, text: str, auth_token: Optional[str] = None) -> List[Message]:
        """
        Handle one user message.
        
        Args:
            text: The user's message
            auth_token: Bearer token for this turn; the engine's own token
                is used when none is given
            
        Returns:
            The bot messages emitted for this turn, already in history
        """
        async with self._lock:
            start = len(self.history)
            context = self.history[-self.history_window:] if self.history_window > 0 else []
            self._append(Message.from_user(text))
            logger.info(f"User message: {log_preview(text)}")
            
            token = auth_token or self.auth_token
            async with self._loading():
                try:
                    if self.intake_in_progress:
                        metrics.chat_messages_total.labels(route="intake").inc()
                        for reply in await self.intake.advance(text, token):
                            self._append(Message.from_bot(reply))
                    else:
                        await self._respond(text, context, token)
                except Exception as e:
                    logger.error(f"Error handling chat message: {e}", exc_info=True)
                    metrics.turn_error_count_total.labels(error_type=type(e).__name__).inc()
                    self.intake.reset()
                    self._append(Message.from_bot(ERROR_MESSAGE))
            
            return [m for m in self.history[start:] if m.sender == Sender.BOT]
    
    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    
    @asynccontextmanager
    async def _loading(self):
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False
    
    def _append(self, message: Message):
        self.history.append(message)
    
    async def _respond(self, text: str, context: List[Message], token: Optional[str]):
        try:
            async with async_timer() as elapsed:
                reply = await asyncio.wait_for(
                    self.assistant_client.send(text, context, token),
                    timeout=self.remote_timeout_seconds
                )
        except asyncio.TimeoutError:
            logger.warning(f"Remote assistant timed out after {self.remote_timeout_seconds}s, using fallback")
            metrics.record_remote_call("timeout", elapsed.seconds)
            await self._fallback(text, token)
            return
        except RemoteAssistantError as e:
            logger.warning(f"Remote assistant unavailable, using fallback: {e}")
            metrics.record_remote_call("error", elapsed.seconds)
            await self._fallback(text, token)
            return
        except Exception as e:
            logger.error(f"Remote assistant call failed, using fallback: {e}", exc_info=True)
            metrics.record_remote_call("error", elapsed.seconds)
            await self._fallback(text, token)
            return
        
        metrics.record_remote_call("success", elapsed.seconds)
        metrics.chat_messages_total.labels(route="remote").inc()
        self._append(Message.from_bot(reply.message))
        
        if reply.create_ticket:
            self._append(Message.from_bot(self.intake.start(text)))
    
    async def _fallback(self, text: str, token: Optional[str]):
        metrics.chat_messages_total.labels(route="classifier").inc()
        result = self.classifier.classify(text)
        metrics.classifier_intent_total.labels(intent=result.intent).inc()
        
        if result.start_intake:
            prompt = self.intake.start(text)
            self._append(Message.from_bot(f"{result.response_text} {prompt}"))
            return
        
        self._append(Message.from_bot(result.response_text))
        
        if result.intent == "status":
            status_text = await self._lookup_status(text, token)
            if status_text:
                self._append(Message.from_bot(status_text))
    
    async def _lookup_status(self, text: str, token: Optional[str]) -> Optional[str]:
        match = TICKET_REFERENCE.search(text)
        if match is None or not token:
            return None
        
        ticket_id = match.group(0).upper()
        try:
            receipt = await self.ticket_client.get_status(ticket_id, token)
        except AssistantError as e:
            logger.warning(f"Ticket status lookup failed for {ticket_id}: {e}")
            return None
        
        if not receipt.status:
            return None
        return f"Ticket {receipt.ticket_number or ticket_id} is currently: {receipt.status}."
