"""
Structured ticket intake dialogue.

    0 idle -> 1 await department -> 2 await priority -> 3 await scope -> submit -> 0

Submission is best effort: when the ticket backend cannot be reached the
user still receives a locally generated reference number.
"""
import logging
import random
from enum import IntEnum
from typing import List, Optional

from stackit_assistant.clients.interfaces import TicketClient
from stackit_assistant.errors import AuthenticationRequiredError, TicketSubmissionError
from stackit_assistant.models import IntakeRecord, Priority
from stackit_assistant.observability import metrics
from stackit_assistant.utils.text import clean_reply

logger = logging.getLogger(__name__)


class IntakeStep(IntEnum):
    IDLE = 0
    AWAIT_DEPARTMENT = 1
    AWAIT_PRIORITY = 2
    AWAIT_SCOPE = 3


DEPARTMENT_PROMPT = "Which department are you in? (for example Engineering, Finance or HR)"
PRIORITY_PROMPT = "What priority would you assign to this issue? Reply 1 for Low, 2 for Medium or 3 for High."
SCOPE_PROMPT = "Who is affected by this issue? (for example just me, my team or the whole office)"
REPROMPT_PREFIX = "Sorry, I didn't catch that. "
AUTH_REQUIRED_MESSAGE = (
    "Sorry, you need to be signed in to create a support ticket. "
    "Please log in and try again."
)
FAILURE_MESSAGE = (
    "Sorry, something went wrong while creating your ticket. "
    "Let's start over: how can I help you?"
)

PROMPTS = {
    IntakeStep.AWAIT_DEPARTMENT: DEPARTMENT_PROMPT,
    IntakeStep.AWAIT_PRIORITY: PRIORITY_PROMPT,
    IntakeStep.AWAIT_SCOPE: SCOPE_PROMPT,
}


def derive_priority(reply: str) -> Priority:
    """Map a free-text priority answer to a Priority, defaulting to Low."""
    text = (reply or "").lower()
    if "2" in text or "medium" in text:
        return Priority.MEDIUM
    if "3" in text or "high" in text:
        return Priority.HIGH
    return Priority.LOW


def generate_fallback_ticket_number(rng: Optional[random.Random] = None) -> str:
    """Local reference in the form INC######."""
    rng = rng or random
    return f"INC{rng.randint(100000, 999999)}"


def format_confirmation(record: IntakeRecord) -> str:
    return (
        f"Your support ticket has been created. Ticket number: {record.ticket_number}. "
        f"Department: {record.department}, Priority: {record.priority.value}, "
        f"Scope: {record.scope}. Our IT team will be in touch soon."
    )


class IntakeStateMachine:
    """
    Holds the intake step and the partially built IntakeRecord.
    
    There is no error state: any failure resets to idle with a message for
    the user.
    """
    
    def __init__(self, ticket_client: TicketClient, rng: Optional[random.Random] = None):
        self.ticket_client = ticket_client
        self.rng = rng
        self.step = IntakeStep.IDLE
        self.record: Optional[IntakeRecord] = None
        self.last_record: Optional[IntakeRecord] = None
    
    @property
    def in_progress(self) -> bool:
        return self.step > IntakeStep.IDLE
    
    def start(self, description: str) -> str:
        """Begin intake with the triggering message as description."""
        self.record = IntakeRecord(description=description)
        self._move_to(IntakeStep.AWAIT_DEPARTMENT)
        logger.info("Ticket intake started")
        return DEPARTMENT_PROMPT
    
    def reset(self):
        if self.step != IntakeStep.IDLE:
            self._move_to(IntakeStep.IDLE)
        self.record = None
    
    async def advance(self, reply: str, auth_token: Optional[str] = None) -> List[str]:
        """
        Consume one user reply.
        
        Args:
            reply: The user's answer to the current prompt
            auth_token: Bearer token used when the ticket is submitted
            
        Returns:
            Bot messages to emit, in order
        """
        step = self.step
        if step not in PROMPTS or self.record is None:
            logger.error(f"Unexpected intake step {step!r}, resetting")
            self.reset()
            return [FAILURE_MESSAGE]
        
        text = clean_reply(reply)
        if not text:
            return [REPROMPT_PREFIX + PROMPTS[step]]
        
        if step == IntakeStep.AWAIT_DEPARTMENT:
            self.record.department = text
            self._move_to(IntakeStep.AWAIT_PRIORITY)
            return [PRIORITY_PROMPT]
        
        if step == IntakeStep.AWAIT_PRIORITY:
            self.record.priority = derive_priority(text)
            self._move_to(IntakeStep.AWAIT_SCOPE)
            return [SCOPE_PROMPT]
        
        self.record.scope = text
        return [await self._submit(auth_token)]
    
    async def _submit(self, auth_token: Optional[str]) -> str:
        record = self.record
        fallback = generate_fallback_ticket_number(self.rng)
        
        try:
            receipt = await self.ticket_client.submit(record, auth_token)
        except AuthenticationRequiredError:
            logger.warning("Ticket submission attempted without an auth token")
            metrics.ticket_submissions_total.labels(status="unauthenticated").inc()
            self.reset()
            return AUTH_REQUIRED_MESSAGE
        except TicketSubmissionError as e:
            logger.warning(f"Ticket submission failed, using fallback {fallback}: {e}")
            metrics.ticket_submissions_total.labels(status="fallback").inc()
            ticket_number = fallback
        else:
            metrics.ticket_submissions_total.labels(status="success").inc()
            ticket_number = receipt.ticket_number or fallback
        
        record.ticket_number = ticket_number
        self.last_record = record
        self.reset()
        logger.info(f"Ticket intake completed: {ticket_number}")
        return format_confirmation(record)
    
    def _move_to(self, step: IntakeStep):
        metrics.record_intake_transition(int(self.step), int(step))
        self.step = step
