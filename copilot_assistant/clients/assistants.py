from typing import List

from copilot_assistant.clients.base import BaseClient
from copilot_assistant.constants.assistant import ORDER_DESC
from copilot_assistant.schemas.assistants import AssistantList, AssistantRead
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class AssistantsClient(BaseClient):

    def list_assistants(self, order: str = ORDER_DESC) -> List[AssistantRead]:
        logging_utility.info("Listing assistants, order: %s", order)
        payload = self._read("/assistants", "listing assistants", params={"order": order})
        assistants = self._parse(AssistantList, payload, "listing assistants")
        logging_utility.info("Retrieved %d assistants", len(assistants.data))
        return assistants.data
