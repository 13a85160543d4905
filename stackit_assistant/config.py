"""
Configuration module for the StackIT assistant service.
Loads settings from environment variables with sensible defaults.
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    
    # Help-desk backend (empty api_url means no remote assistant is reachable)
    api_url: str = "http://localhost:5000/api"
    assistant_path: str = "/chatbot"
    analyze_path: str = "/chatbot/analyze-issue"
    tickets_path: str = "/tickets"
    remote_timeout_seconds: float = 10.0
    http_max_attempts: int = 2
    
    # Conversation
    history_window: int = 10
    min_message_length: int = 10
    greeting_message: str = (
        "Hi there! I'm your StackIT Assistant. "
        "How can I help you with your IT concerns today?"
    )
    
    # Sessions
    session_ttl_seconds: int = 3600
    max_sessions: int = 1000
    session_cleanup_interval_seconds: int = 300
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        env_prefix = "STACKIT_"
        case_sensitive = False


# Global settings instance
settings = Settings()
