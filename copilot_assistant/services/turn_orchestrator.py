import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Set, Tuple

from copilot_assistant.clients.gateway import AssistantsGateway
from copilot_assistant.config import AssistantConfig
from copilot_assistant.constants.assistant import (
    INT64_MAX,
    INT64_MIN,
    NO_REPLY_FOUND,
    ORDER_DESC,
    PROJECT_CONTEXT_TEMPLATE,
    REPLY_RUN_STATUSES,
    RUN_STATUS_REQUIRES_ACTION,
)
from copilot_assistant.exceptions import (
    AssistantClientError,
    RunFailedError,
    RunTimeoutError,
    TurnCancelledError,
)
from copilot_assistant.schemas.assistants import AssistantRead
from copilot_assistant.schemas.context import ContextPayload
from copilot_assistant.services.context_tracker import ContextTracker
from copilot_assistant.services.logging_service import LoggingUtility
from copilot_assistant.services.run_poller import RunPoller
from copilot_assistant.services.session_store import SessionStore

logging_utility = LoggingUtility()


def validate_session_id(session_id) -> int:
    if isinstance(session_id, bool) or not isinstance(session_id, int):
        raise ValueError(f"Session id must be an integer, got {type(session_id).__name__}")
    if not INT64_MIN <= session_id <= INT64_MAX:
        raise ValueError(f"Session id {session_id} does not fit in 64 bits")
    return session_id


class TurnHandle:
    """
    Caller-side view of a turn running on the orchestrator's worker pool.
    """

    def __init__(self, session_id: int, future: Future, cancel_event: threading.Event):
        self.session_id = session_id
        self.future = future
        self._cancel_event = cancel_event

    def cancel(self) -> None:
        """
        Abandon the turn. A turn that has not started never runs; a running
        turn stops at its next cancellation check and raises TurnCancelledError.
        """
        self._cancel_event.set()
        self.future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> str:
        try:
            return self.future.result(timeout=timeout)
        except CancelledError as e:
            raise TurnCancelledError() from e

    def add_done_callback(self, fn: Callable[["TurnHandle"], None]) -> None:
        self.future.add_done_callback(lambda _future: fn(self))


class TurnOrchestrator:
    """
    Drives one conversational turn end to end:

        thread ready -> message sent -> run created -> polling -> reply fetched

    Turns for the same session are serialized on the session's lock; turns
    for different sessions run independently. Gateway errors propagate to
    the caller unchanged and write calls are never retried, so a retried
    turn continues the conversation rather than redoing it.
    """

    def __init__(
        self,
        config: Optional[AssistantConfig] = None,
        gateway=None,
        session_store: Optional[SessionStore] = None,
        context_tracker: Optional[ContextTracker] = None,
        max_workers: Optional[int] = None,
    ):
        self.config = config or AssistantConfig()
        self._owns_gateway = gateway is None
        self.gateway = gateway or AssistantsGateway(self.config)
        self.session_store = session_store or SessionStore()
        self.context_tracker = context_tracker or ContextTracker()
        self.poller = RunPoller(
            self.gateway,
            poll_interval=self.config.poll_interval,
            max_wait=self.config.max_poll_wait,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or self.config.max_workers,
            thread_name_prefix="copilot-turn",
        )
        self._inflight: Set[TurnHandle] = set()
        self._inflight_lock = threading.Lock()
        self._clear_lock = threading.Lock()
        logging_utility.info("TurnOrchestrator initialized: %r", self.config)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()

    def configure(self, credential: str, assistant_id: str) -> None:
        self.config.api_key = credential or None
        self.config.assistant_id = assistant_id or None
        self.gateway.set_api_key(self.config.api_key)
        logging_utility.info("Configured assistant: %s", self.config.assistant_id)

    def available_assistants(self) -> List[AssistantRead]:
        return self.gateway.list_assistants(order=ORDER_DESC)

    def submit_turn(
        self,
        session_id: int,
        text: str,
        context: Optional[ContextPayload] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Run a full turn on the calling thread and return the assistant's
        reply, or NO_REPLY_FOUND when the run produced no assistant message.
        """
        session_id = validate_session_id(session_id)
        self.config.require()
        with self.session_store.session_lock(session_id):
            return self._run_turn(session_id, text, context, cancel_event)

    def submit_turn_async(
        self, session_id: int, text: str, context: Optional[ContextPayload] = None
    ) -> TurnHandle:
        session_id = validate_session_id(session_id)
        cancel_event = threading.Event()
        future = self._executor.submit(self.submit_turn, session_id, text, context, cancel_event)
        handle = TurnHandle(session_id, future, cancel_event)
        with self._inflight_lock:
            self._inflight.add(handle)
        handle.add_done_callback(self._forget)
        return handle

    def clear_session(self, session_id: int) -> None:
        """
        Forget the session's thread and injected context. An in-flight turn is
        not waited for; it finishes on the old thread without touching the
        fresh context scope.
        """
        session_id = validate_session_id(session_id)
        with self._clear_lock:
            self.session_store.clear(session_id)
            self.context_tracker.reset(session_id)
        logging_utility.info("Session %s cleared", session_id)

    def shutdown(self, wait: bool = True, cancel_inflight: bool = True) -> None:
        if cancel_inflight:
            with self._inflight_lock:
                pending = list(self._inflight)
            for handle in pending:
                handle.cancel()
        self._executor.shutdown(wait=wait)
        if self._owns_gateway:
            self.gateway.close()

    def _forget(self, handle: TurnHandle) -> None:
        with self._inflight_lock:
            self._inflight.discard(handle)

    def _run_turn(
        self,
        session_id: int,
        text: str,
        context: Optional[ContextPayload],
        cancel_event: Optional[threading.Event],
    ) -> str:
        if cancel_event is not None and cancel_event.is_set():
            raise TurnCancelledError()

        thread_id = self.session_store.get_or_create_thread(session_id, self.gateway.create_thread)
        outgoing, injected_key = self._compose_message(session_id, text, context)

        # The message must exist before the run: runs on an empty thread are rejected.
        self.gateway.append_message(thread_id, outgoing)
        if injected_key is not None:
            self._mark_injected(session_id, thread_id, injected_key)

        run_id = self.gateway.create_run(thread_id, self.config.assistant_id)
        try:
            run = self.poller.wait(thread_id, run_id, cancel_event)
        except (RunTimeoutError, TurnCancelledError):
            self._abandon_run(thread_id, run_id)
            raise

        if run.status == RUN_STATUS_REQUIRES_ACTION:
            # Tool calls are not handled here; an unanswered run blocks the thread.
            self._abandon_run(thread_id, run_id)

        if run.status not in REPLY_RUN_STATUSES:
            logging_utility.warning(
                "Run %s on thread %s ended with status %s: %s",
                run_id,
                thread_id,
                run.status,
                run.error_message,
            )
            if self.config.raise_on_failed_run:
                raise RunFailedError(run_id, run.status, run.error_message)

        return self._fetch_reply(thread_id, run_id)

    def _mark_injected(self, session_id: int, thread_id: str, key: str) -> None:
        with self._clear_lock:
            if self.session_store.get_thread(session_id) != thread_id:
                logging_utility.info(
                    "Session %s was cleared during the turn; context '%s' not recorded",
                    session_id,
                    key,
                )
                return
            self.context_tracker.mark_injected(session_id, key)

    def _compose_message(
        self, session_id: int, text: str, context: Optional[ContextPayload]
    ) -> Tuple[str, Optional[str]]:
        if context is None or not self.context_tracker.should_inject(session_id, context.key):
            return text, None
        logging_utility.info("Injecting context '%s' into session %s", context.key, session_id)
        return PROJECT_CONTEXT_TEMPLATE.format(content=context.content, message=text), context.key

    def _fetch_reply(self, thread_id: str, run_id: str) -> str:
        for message in self.gateway.list_messages(thread_id, run_id=run_id, order=ORDER_DESC):
            if message.is_assistant:
                logging_utility.debug("Assistant reply for run %s: %s", run_id, message.text)
                return message.text
        logging_utility.warning("No assistant reply found for run %s on thread %s", run_id, thread_id)
        return NO_REPLY_FOUND

    def _abandon_run(self, thread_id: str, run_id: str) -> None:
        if not self.config.cancel_remote_runs:
            return
        try:
            self.gateway.cancel_run(thread_id, run_id)
        except AssistantClientError as e:
            logging_utility.warning("Could not cancel abandoned run %s: %s", run_id, str(e))
