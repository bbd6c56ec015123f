from copilot_assistant.clients.base import BaseClient
from copilot_assistant.exceptions import ConfigError
from copilot_assistant.schemas.runs import RunCreate, RunRead
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class RunsClient(BaseClient):

    def create_run(self, thread_id: str, assistant_id: str) -> RunRead:
        if not assistant_id:
            raise ConfigError("Assistant ID not set.")
        logging_utility.info("Creating run for assistant_id: %s, thread_id: %s", assistant_id, thread_id)
        payload = self._write(
            f"/threads/{thread_id}/runs",
            "creating run",
            json=RunCreate(assistant_id=assistant_id).model_dump(),
        )
        run = self._parse(RunRead, payload, "creating run")
        logging_utility.info("Run created successfully with id: %s", run.id)
        return run

    def retrieve_run(self, thread_id: str, run_id: str) -> RunRead:
        logging_utility.debug("Retrieving run with id: %s", run_id)
        payload = self._read(f"/threads/{thread_id}/runs/{run_id}", "retrieving run")
        return self._parse(RunRead, payload, "retrieving run")

    def cancel_run(self, thread_id: str, run_id: str) -> RunRead:
        logging_utility.info("Cancelling run with id: %s", run_id)
        payload = self._write(f"/threads/{thread_id}/runs/{run_id}/cancel", "cancelling run")
        run = self._parse(RunRead, payload, "cancelling run")
        logging_utility.info("Run %s cancellation requested, status: %s", run.id, run.status)
        return run
