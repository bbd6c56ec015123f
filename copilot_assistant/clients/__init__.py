from copilot_assistant.clients.assistants import AssistantsClient
from copilot_assistant.clients.gateway import AssistantsGateway
from copilot_assistant.clients.messages import MessagesClient
from copilot_assistant.clients.runs import RunsClient
from copilot_assistant.clients.threads import ThreadsClient

__all__ = [
    "AssistantsClient",
    "AssistantsGateway",
    "MessagesClient",
    "RunsClient",
    "ThreadsClient",
]
