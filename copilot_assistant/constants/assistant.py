DEFAULT_BASE_URL = "https://api.openai.com/v1"

PROTOCOL_HEADER = "OpenAI-Beta"
DEFAULT_PROTOCOL_VERSION = "assistants=v2"

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_MAX_POLL_WAIT = 120.0
DEFAULT_READ_RETRIES = 3
DEFAULT_READ_RETRY_WAIT = 1.0
DEFAULT_MAX_WORKERS = 4

# ------------------------------------------------
# Run lifecycle
# ------------------------------------------------
RUN_STATUS_COMPLETED = "completed"
RUN_STATUS_FAILED = "failed"
RUN_STATUS_CANCELLED = "cancelled"
RUN_STATUS_EXPIRED = "expired"
RUN_STATUS_INCOMPLETE = "incomplete"
RUN_STATUS_REQUIRES_ACTION = "requires_action"

TERMINAL_RUN_STATUSES = frozenset(
    {
        RUN_STATUS_COMPLETED,
        RUN_STATUS_FAILED,
        RUN_STATUS_CANCELLED,
        RUN_STATUS_EXPIRED,
        RUN_STATUS_INCOMPLETE,
        RUN_STATUS_REQUIRES_ACTION,
    }
)

# Terminal statuses whose messages are worth reading back.
REPLY_RUN_STATUSES = frozenset({RUN_STATUS_COMPLETED, RUN_STATUS_INCOMPLETE})

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

ORDER_DESC = "desc"
ORDER_ASC = "asc"

PROJECT_CONTEXT_TEMPLATE = "Project context:\n{content}\n\nUser: {message}"

NO_REPLY_FOUND = "No assistant reply found."

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
