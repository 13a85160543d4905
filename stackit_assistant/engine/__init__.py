from stackit_assistant.engine.conversation import ConversationEngine
from stackit_assistant.engine.sessions import SessionRegistry

__all__ = ["ConversationEngine", "SessionRegistry"]
