import threading
from typing import Dict, FrozenSet, Set

from copilot_assistant.services.logging_service import LoggingUtility

logging_utility = LoggingUtility()


class ContextTracker:
    """
    Remembers which context keys have already been injected, per session.

    Keys are scoped to the (session_id, key) pair: the same file injected in
    one conversation is still injected on the first turn of another.
    """

    def __init__(self):
        self._injected: Dict[int, Set[str]] = {}
        self._lock = threading.Lock()

    def should_inject(self, session_id: int, key: str) -> bool:
        with self._lock:
            return key not in self._injected.get(session_id, ())

    def mark_injected(self, session_id: int, key: str) -> None:
        with self._lock:
            keys = self._injected.setdefault(session_id, set())
            if key in keys:
                return
            keys.add(key)
        logging_utility.debug("Context key '%s' marked injected for session %s", key, session_id)

    def reset(self, session_id: int) -> None:
        with self._lock:
            dropped = self._injected.pop(session_id, None)
        if dropped:
            logging_utility.info("Reset %d context keys for session %s", len(dropped), session_id)

    def injected_keys(self, session_id: int) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._injected.get(session_id, ()))
