from typing import List, Optional

from copilot_assistant.clients.base import BaseClient
from copilot_assistant.constants.assistant import ORDER_ASC, ORDER_DESC, ROLE_USER
from copilot_assistant.schemas.messages import MessageCreate, MessageList, MessageRead
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class MessagesClient(BaseClient):

    def create_message(self, thread_id: str, content: str, role: str = ROLE_USER) -> MessageRead:
        try:
            message_data = MessageCreate(role=role, content=content)
        except ValueError as e:
            logging_utility.error("Validation error: %s", str(e))
            raise
        logging_utility.info("Creating message for thread_id: %s, role: %s", thread_id, message_data.role)
        logging_utility.debug("Message content: %s", content)
        payload = self._write(
            f"/threads/{thread_id}/messages", "creating message", json=message_data.model_dump()
        )
        message = self._parse(MessageRead, payload, "creating message")
        logging_utility.info("Message created successfully with id: %s", message.id)
        return message

    def list_messages(
        self,
        thread_id: str,
        run_id: Optional[str] = None,
        order: str = ORDER_DESC,
        limit: Optional[int] = None,
    ) -> List[MessageRead]:
        if order not in (ORDER_ASC, ORDER_DESC):
            raise ValueError(f"Invalid order: {order}. Must be '{ORDER_ASC}' or '{ORDER_DESC}'")
        params = {"order": order}
        if run_id:
            params["run_id"] = run_id
        if limit is not None:
            params["limit"] = limit
        logging_utility.info(
            "Listing messages for thread_id: %s, run_id: %s, order: %s", thread_id, run_id, order
        )
        payload = self._read(f"/threads/{thread_id}/messages", "listing messages", params=params)
        messages = self._parse(MessageList, payload, "listing messages")
        logging_utility.info("Retrieved %d messages", len(messages.data))
        return messages.data
