import threading
import weakref
from typing import Callable, Dict, Optional

from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class SessionStore:
    """
    In-memory mapping from caller session id to remote thread id.

    Thread creation is resolved under a per-session lock with a double
    check, so concurrent first turns of one session create exactly one
    thread while other sessions proceed without contention. Clearing only
    forgets the mapping; the remote thread is left alone.
    """

    def __init__(self):
        self._threads: Dict[int, str] = {}
        # Entries live only while some turn holds a reference to the lock.
        self._session_locks: "weakref.WeakValueDictionary[int, threading.RLock]" = (
            weakref.WeakValueDictionary()
        )
        self._lock = threading.Lock()

    def __contains__(self, session_id: int) -> bool:
        with self._lock:
            return session_id in self._threads

    def __len__(self) -> int:
        with self._lock:
            return len(self._threads)

    def session_lock(self, session_id: int) -> threading.RLock:
        with self._lock:
            lock = self._session_locks.get(session_id)
            if lock is None:
                lock = threading.RLock()
                self._session_locks[session_id] = lock
            return lock

    def get_thread(self, session_id: int) -> Optional[str]:
        with self._lock:
            return self._threads.get(session_id)

    def get_or_create_thread(self, session_id: int, create_fn: Callable[[], str]) -> str:
        thread_id = self.get_thread(session_id)
        if thread_id is not None:
            return thread_id

        with self.session_lock(session_id):
            thread_id = self.get_thread(session_id)
            if thread_id is not None:
                return thread_id
            # create_fn is a remote call; it runs outside the map lock.
            thread_id = create_fn()
            with self._lock:
                self._threads[session_id] = thread_id
        logging_utility.info("Session %s bound to thread %s", session_id, thread_id)
        return thread_id

    def clear(self, session_id: int) -> Optional[str]:
        with self._lock:
            thread_id = self._threads.pop(session_id, None)
        if thread_id is not None:
            logging_utility.info("Session %s released thread %s", session_id, thread_id)
        return thread_id
