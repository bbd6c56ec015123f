from copilot_assistant.clients.base import BaseClient
from copilot_assistant.schemas.threads import ThreadRead
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class ThreadsClient(BaseClient):

    def create_thread(self) -> ThreadRead:
        logging_utility.info("Creating thread")
        payload = self._write("/threads", "creating thread")
        thread = self._parse(ThreadRead, payload, "creating thread")
        logging_utility.info("Thread created successfully with id: %s", thread.id)
        return thread
