import threading
import time
from typing import Callable, Optional

from copilot_assistant.constants.assistant import DEFAULT_MAX_POLL_WAIT, DEFAULT_POLL_INTERVAL
from copilot_assistant.exceptions import RunTimeoutError, TurnCancelledError
from copilot_assistant.schemas.runs import RunRead
from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class RunPoller:
    """
    Blocks the calling worker until a run reaches a terminal status.

    The wait between polls doubles as the cancellation check, so a set
    cancel event is noticed within one poll interval. With max_wait=None
    the loop is unbounded.
    """

    def __init__(
        self,
        gateway,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: Optional[float] = DEFAULT_MAX_POLL_WAIT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        self.poll_interval = max(0.0, poll_interval)
        self.max_wait = max_wait
        self._clock = clock

    def wait(
        self, thread_id: str, run_id: str, cancel_event: Optional[threading.Event] = None
    ) -> RunRead:
        cancel_event = cancel_event or threading.Event()
        started = self._clock()
        polls = 0

        while True:
            delay = self.poll_interval
            if self.max_wait is not None:
                elapsed = self._clock() - started
                remaining = self.max_wait - elapsed
                if remaining <= 0:
                    logging_utility.warning(
                        "Run %s still pending after %.1fs and %d polls", run_id, elapsed, polls
                    )
                    raise RunTimeoutError(run_id, elapsed)
                delay = min(delay, remaining)

            if cancel_event.wait(delay):
                logging_utility.info("Stopped waiting on run %s: turn cancelled", run_id)
                raise TurnCancelledError(run_id)

            run = self.gateway.retrieve_run(thread_id, run_id)
            polls += 1
            logging_utility.debug("Run %s status: %s (poll %d)", run_id, run.status, polls)

            if run.is_terminal:
                logging_utility.info(
                    "Run %s ended with status: %s after %d polls", run_id, run.status, polls
                )
                return run
