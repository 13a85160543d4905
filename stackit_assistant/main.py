"""
FastAPI application with /chat, /metrics, and /healthz endpoints.
Serves as the entry point for the StackIT assistant.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import REGISTRY, generate_latest, CONTENT_TYPE_LATEST

from stackit_assistant import __version__
from stackit_assistant.api.routes import router as chat_router
from stackit_assistant.clients.assistant import RemoteAssistantClient
from stackit_assistant.clients.http import AsyncHttpClient
from stackit_assistant.clients.interfaces import AssistantClient, TicketClient
from stackit_assistant.clients.offline import OfflineAssistantClient, OfflineTicketClient
from stackit_assistant.clients.tickets import TicketSubmissionClient
from stackit_assistant.config import settings
from stackit_assistant.engine.conversation import ConversationEngine
from stackit_assistant.engine.sessions import SessionRegistry
from stackit_assistant.intent.classifier import IntentClassifier
from stackit_assistant.logging_conf import setup_logging
from stackit_assistant.observability.middleware import MetricsMiddleware

# Setup logging
logger = setup_logging()


def create_app(
    assistant_client: Optional[AssistantClient] = None,
    ticket_client: Optional[TicketClient] = None
) -> FastAPI:
    """
    Build the application.
    
    Clients default to HTTP clients for the configured help-desk backend;
    tests pass their own.
    """
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting StackIT assistant...")
        http: Optional[AsyncHttpClient] = None
        
        assistant = assistant_client
        tickets = ticket_client
        if (assistant is None or tickets is None) and settings.api_url:
            http = AsyncHttpClient(
                base_url=settings.api_url,
                timeout=settings.remote_timeout_seconds,
                max_attempts=settings.http_max_attempts
            )
        
        if assistant is None:
            if http is not None:
                logger.info(f"Using remote assistant at {settings.api_url}")
                assistant = RemoteAssistantClient(http)
            else:
                logger.info("No api_url configured, using offline assistant")
                assistant = OfflineAssistantClient()
        
        if tickets is None:
            tickets = TicketSubmissionClient(http) if http is not None else OfflineTicketClient()
        
        classifier = IntentClassifier()
        
        def new_engine() -> ConversationEngine:
            return ConversationEngine(
                assistant_client=assistant,
                ticket_client=tickets,
                classifier=classifier
            )
        
        app.state.assistant_client = assistant
        app.state.ticket_client = tickets
        registry = SessionRegistry(new_engine)
        app.state.registry = registry
        app.state.session_cleanup = asyncio.create_task(
            registry.purge_periodically(settings.session_cleanup_interval_seconds)
        )
        logger.info(f"Application ready on http://{settings.host}:{settings.port}")
        
        yield
        
        logger.info("Shutting down...")
        app.state.session_cleanup.cancel()
        try:
            await app.state.session_cleanup
        except asyncio.CancelledError:
            pass
        if http is not None:
            await http.aclose()
    
    app = FastAPI(
        title="StackIT Assistant",
        description="Conversational IT support assistant with ticket intake",
        version=__version__,
        lifespan=lifespan
    )
    app.add_middleware(MetricsMiddleware)
    app.include_router(chat_router)
    
    @app.get("/healthz")
    async def healthz():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "stackit-assistant",
            "assistant": "offline" if isinstance(app.state.assistant_client, OfflineAssistantClient) else "remote"
        }
    
    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus metrics in exposition format."""
        return Response(
            content=generate_latest(REGISTRY),
            media_type=CONTENT_TYPE_LATEST
        )
    
    return app


app = create_app()


def run():
    """Console entry point."""
    import uvicorn
    uvicorn.run("stackit_assistant.main:app", host=settings.host, port=settings.port)
