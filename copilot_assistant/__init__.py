from copilot_assistant.clients.gateway import AssistantsGateway
from copilot_assistant.config import AssistantConfig
from copilot_assistant.constants.assistant import NO_REPLY_FOUND
from copilot_assistant.exceptions import (
    AssistantClientError,
    AuthError,
    ConfigError,
    GatewayError,
    NotFoundError,
    ProtocolError,
    RunFailedError,
    RunTimeoutError,
    TransportError,
    TurnCancelledError,
)
from copilot_assistant.schemas.context import ContextPayload
from copilot_assistant.services.context_tracker import ContextTracker
from copilot_assistant.services.run_poller import RunPoller
from copilot_assistant.services.session_store import SessionStore
from copilot_assistant.services.turn_orchestrator import TurnHandle, TurnOrchestrator

__version__ = "0.1.0"

__all__ = [
    "AssistantClientError",
    "AssistantConfig",
    "AssistantsGateway",
    "AuthError",
    "ConfigError",
    "ContextPayload",
    "ContextTracker",
    "GatewayError",
    "NO_REPLY_FOUND",
    "NotFoundError",
    "ProtocolError",
    "RunFailedError",
    "RunPoller",
    "RunTimeoutError",
    "SessionStore",
    "TransportError",
    "TurnCancelledError",
    "TurnHandle",
    "TurnOrchestrator",
]
