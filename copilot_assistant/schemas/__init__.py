from copilot_assistant.schemas.assistants import AssistantList, AssistantRead
from copilot_assistant.schemas.context import ContextPayload
from copilot_assistant.schemas.messages import (
    MessageContent,
    MessageCreate,
    MessageList,
    MessageRead,
    MessageRole,
    MessageText,
)
from copilot_assistant.schemas.runs import RunCreate, RunError, RunRead
from copilot_assistant.schemas.threads import ThreadRead

__all__ = [
    "AssistantList",
    "AssistantRead",
    "ContextPayload",
    "MessageContent",
    "MessageCreate",
    "MessageList",
    "MessageRead",
    "MessageRole",
    "MessageText",
    "RunCreate",
    "RunError",
    "RunRead",
    "ThreadRead",
]
