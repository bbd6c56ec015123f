from typing import List, Optional

import httpx

from copilot_assistant.clients.assistants import AssistantsClient
from copilot_assistant.clients.base import apply_headers, build_http_client
from copilot_assistant.clients.messages import MessagesClient
from copilot_assistant.clients.runs import RunsClient
from copilot_assistant.clients.threads import ThreadsClient
from copilot_assistant.config import AssistantConfig
from copilot_assistant.constants.assistant import ORDER_DESC, ROLE_USER
from copilot_assistant.schemas.assistants import AssistantRead
from copilot_assistant.schemas.messages import MessageRead
from copilot_assistant.schemas.runs import RunRead
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class AssistantsGateway:
    """
    Narrow, stateless view of the remote assistants service.

    Each call is one request/response exchange. Writes (thread, message,
    run creation and run cancellation) are never retried; reads are retried
    on transport failures only.
    """

    def __init__(self, config: Optional[AssistantConfig] = None, client: Optional[httpx.Client] = None):
        self.config = config or AssistantConfig()
        self._owns_client = client is None
        self.client = client or build_http_client(self.config)
        self.threads = ThreadsClient(self.config, self.client)
        self.messages = MessagesClient(self.config, self.client)
        self.runs = RunsClient(self.config, self.client)
        self.assistants = AssistantsClient(self.config, self.client)
        logging_utility.info("AssistantsGateway initialized with base_url: %s", self.config.base_url)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def set_api_key(self, api_key: Optional[str]) -> None:
        self.config.api_key = api_key or None
        apply_headers(self.client, self.config)

    def create_thread(self) -> str:
        return self.threads.create_thread().id

    def append_message(self, thread_id: str, content: str, role: str = ROLE_USER) -> str:
        return self.messages.create_message(thread_id, content, role=role).id

    def create_run(self, thread_id: str, assistant_id: str) -> str:
        return self.runs.create_run(thread_id, assistant_id).id

    def get_run_status(self, thread_id: str, run_id: str) -> str:
        return self.runs.retrieve_run(thread_id, run_id).status

    def retrieve_run(self, thread_id: str, run_id: str) -> RunRead:
        return self.runs.retrieve_run(thread_id, run_id)

    def cancel_run(self, thread_id: str, run_id: str) -> RunRead:
        return self.runs.cancel_run(thread_id, run_id)

    def list_messages(
        self, thread_id: str, run_id: Optional[str] = None, order: str = ORDER_DESC
    ) -> List[MessageRead]:
        return self.messages.list_messages(thread_id, run_id=run_id, order=order)

    def list_assistants(self, order: str = ORDER_DESC) -> List[AssistantRead]:
        return self.assistants.list_assistants(order=order)
