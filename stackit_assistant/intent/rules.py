"""
Ordered keyword rules for offline intent classification.

Rules are evaluated top to bottom and the first match wins, so specific
topics must come before the generic "problem" and greeting catches.
"""
import re
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

# Predicates receive the lower-cased message.
Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class IntentRule:
    """A (predicate, outcome) pair of the classification table."""
    intent: str
    predicate: Predicate
    response: str
    start_intake: bool = False


def any_keyword(*keywords: str) -> Predicate:
    """Match when any keyword occurs as a substring."""
    def predicate(text: str) -> bool:
        return any(keyword in text for keyword in keywords)
    return predicate


def any_word(*words: str) -> Predicate:
    """Match when any of the words occurs as a whole word."""
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")

    def predicate(text: str) -> bool:
        return pattern.search(text) is not None
    return predicate


def shorter_than(length: int) -> Predicate:
    def predicate(text: str) -> bool:
        return len(text) < length
    return predicate


def either(*predicates: Predicate) -> Predicate:
    def predicate(text: str) -> bool:
        return any(p(text) for p in predicates)
    return predicate


def always(text: str) -> bool:
    return True


DEFAULT_RESPONSE = (
    "I'm here to help with your IT support needs. "
    "Could you provide more details about your issue?"
)

GREETING_RESPONSE = (
    "Hello! I'm your StackIT Assistant. I can help with network, account, "
    "software and hardware issues, or create a support ticket for you. "
    "What can I do for you?"
)

TICKET_RESPONSE = (
    "I can create a support ticket for you. I'll ask you a few quick "
    "questions to get it to the right team."
)


def build_rules(min_message_length: int = 10) -> Tuple[IntentRule, ...]:
    """
    Build the classification table.
    
    Args:
        min_message_length: Messages shorter than this that match no topic
            are answered as greetings
    """
    return (
        IntentRule(
            "network",
            any_keyword("network", "internet", "wifi", "wi-fi", "ethernet", "connectivity"),
            "I see you're having network issues. Have you tried restarting your "
            "router or checking your network cables? If the problem persists, I can "
            "create a network support ticket for you.",
        ),
        IntentRule(
            "account",
            any_keyword("password", "reset", "login", "log in", "sign in",
                        "locked out", "account", "mfa", "2fa"),
            "For password resets, I'll need to verify your identity. Please provide "
            "your employee ID or email address associated with your account.",
        ),
        IntentRule(
            "software",
            any_keyword("software", "install", "application", "license", "program"),
            "For software installation issues, please let me know which application "
            "you're trying to install and any error messages you're seeing. Our IT "
            "team can help with approved software deployments.",
        ),
        IntentRule(
            "hardware",
            any_keyword("hardware", "device", "printer", "monitor", "keyboard",
                        "mouse", "laptop", "computer", "screen"),
            "I can help with hardware issues. Please provide details about the device "
            "(model, asset tag if available) and describe the problem you're experiencing.",
        ),
        IntentRule(
            "email",
            any_keyword("email", "e-mail", "outlook", "inbox", "mailbox", "calendar"),
            "For email problems, check that you're connected and try restarting your "
            "mail client. If messages are stuck or your mailbox is full, let me know "
            "and I can raise it with the messaging team.",
        ),
        IntentRule(
            "vpn",
            any_word("vpn", "remote access", "anyconnect", "globalprotect"),
            "For VPN issues, make sure your VPN client is up to date and that you're "
            "using your current network credentials. Disconnecting and reconnecting "
            "often clears a stale session.",
        ),
        IntentRule(
            "security",
            any_keyword("virus", "malware", "phishing", "hacked", "suspicious",
                        "security", "breach", "ransomware"),
            "Security concerns are treated with priority. Please don't click any "
            "suspicious links, disconnect the affected machine from the network if you "
            "suspect an infection, and report the incident so our security team can "
            "investigate.",
        ),
        IntentRule(
            "mobile",
            any_keyword("phone", "mobile", "iphone", "android", "tablet", "ipad"),
            "For mobile device issues, tell me the device model and operating system "
            "version. Company phones can also be re-enrolled in device management if "
            "apps or mail stopped syncing.",
        ),
        IntentRule(
            "equipment",
            any_keyword("new equipment", "equipment request", "purchase", "procure",
                        "new hire", "onboarding"),
            "New equipment requests need manager approval. Let me know what you need "
            "and for whom, and I'll point you to the right request process.",
        ),
        IntentRule(
            "training",
            any_keyword("training", "tutorial", "how do i", "how to", "learn", "guide"),
            "Our knowledge base has step-by-step guides and the IT team runs regular "
            "training sessions. Tell me which tool you'd like to learn and I'll find "
            "the right material.",
        ),
        IntentRule(
            "ticket",
            any_keyword("ticket", "support", "help desk", "helpdesk"),
            TICKET_RESPONSE,
            start_intake=True,
        ),
        IntentRule(
            "urgent",
            any_keyword("urgent", "emergency", "asap", "after hours", "after-hours",
                        "weekend", "critical", "immediately"),
            "For urgent issues outside business hours, please call the IT on-call "
            "line. Critical outages are handled around the clock.",
        ),
        IntentRule(
            "status",
            any_keyword("status", "any update", "progress", "follow up", "follow-up"),
            "To check on an existing request, share your ticket number (for example "
            "INC123456) and I'll look it up, or open the ticket list in your dashboard.",
        ),
        IntentRule(
            "problem",
            any_keyword("error", "problem", "issue", "not working", "broken",
                        "crash", "fail", "bug"),
            "Sorry to hear something isn't working. Could you describe what you were "
            "doing when it happened and any error message you saw?",
        ),
        IntentRule(
            "gratitude",
            any_keyword("thank", "thx", "appreciate", "cheers"),
            "You're welcome! Is there anything else I can help you with?",
        ),
        IntentRule(
            "greeting",
            either(any_word("hi", "hello", "hey", "good morning", "good afternoon",
                            "good evening"),
                   shorter_than(min_message_length)),
            GREETING_RESPONSE,
        ),
        IntentRule("default", always, DEFAULT_RESPONSE),
    )


DEFAULT_RULES: Sequence[IntentRule] = build_rules()
