"""
Keyword-based intent classifier used when no AI backend answers.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from stackit_assistant.intent.rules import DEFAULT_RESPONSE, IntentRule, build_rules
from stackit_assistant.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a single message."""
    intent: str
    response_text: str
    start_intake: bool = False


class IntentClassifier:
    """
    Maps free text to canned guidance by walking an ordered rule table.
    
    The classifier is pure: the same message always yields the same
    classification, and nothing outside the instance is touched.
    """
    
    def __init__(
        self,
        rules: Optional[Sequence[IntentRule]] = None,
        min_message_length: Optional[int] = None
    ):
        if rules is None:
            length = min_message_length if min_message_length is not None else settings.min_message_length
            rules = build_rules(length)
        if not rules:
            raise ValueError("At least one intent rule is required")
        self.rules = tuple(rules)
    
    def classify(self, message: str) -> Classification:
        """Return the outcome of the first rule matching the message."""
        text = (message or "").lower().strip()
        
        for rule in self.rules:
            if rule.predicate(text):
                logger.debug(f"Message classified as {rule.intent}")
                return Classification(
                    intent=rule.intent,
                    response_text=rule.response,
                    start_intake=rule.start_intake
                )
        
        # Tables without a catch-all rule
        return Classification(intent="default", response_text=DEFAULT_RESPONSE)
