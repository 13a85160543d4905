"""
Logging configuration shared by the service and the conversation engine.
"""
import logging
import sys
from typing import Optional

from stackit_assistant.config import settings


def setup_logging(level: Optional[str] = None):
    """Configure console logging for the application."""
    
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or settings.log_level).upper()))
    # One console handler per process
    if not any(getattr(h, "_stackit", False) for h in root_logger.handlers):
        console_handler._stackit = True
        root_logger.addHandler(console_handler)
    
    # Silence noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    
    return root_logger
