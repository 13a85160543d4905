from stackit_assistant.intent.classifier import Classification, IntentClassifier
from stackit_assistant.intent.rules import IntentRule, DEFAULT_RULES

__all__ = ["Classification", "IntentClassifier", "IntentRule", "DEFAULT_RULES"]
