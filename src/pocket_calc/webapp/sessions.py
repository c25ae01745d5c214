"""
In-memory registry of calculator engines, one per browser session.

Each engine is single-threaded; the registry hands it out under a
per-session lock so concurrent requests from one browser run in turn.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..config import CalculatorConfig
from ..engine import CalculatorEngine

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 1000


class _Entry:
    __slots__ = ("engine", "lock")

    def __init__(self, engine: CalculatorEngine) -> None:
        self.engine = engine
        self.lock = threading.Lock()


class SessionRegistry:
    """Maps session ids to engines, evicting the least recently used."""

    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        engine_factory: Optional[Callable[[CalculatorConfig], CalculatorEngine]] = None,
        max_sessions: int = _MAX_SESSIONS,
    ) -> None:
        self.config = config or CalculatorConfig()
        self._factory = engine_factory or (lambda cfg: CalculatorEngine(config=cfg))
        self._max_sessions = max_sessions
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def new_session_id() -> str:
        return str(uuid.uuid4())

    def _entry(self, session_id: str) -> _Entry:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                entry = _Entry(self._factory(self.config))
                self._entries[session_id] = entry
                logger.info("Created calculator for session %s", session_id)
                while len(self._entries) > self._max_sessions:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.info("Evicted idle calculator session %s", evicted)
            else:
                self._entries.move_to_end(session_id)
            return entry

    @contextmanager
    def use(self, session_id: str) -> Iterator[CalculatorEngine]:
        """
        Borrow the session's engine, creating it on first use.

        Timers that came due since the last request are run before the
        engine is handed out.

        Args:
            session_id: Browser session identifier

        Yields:
            The session's CalculatorEngine, locked for the duration
        """
        entry = self._entry(session_id)
        with entry.lock:
            entry.engine.tick()
            yield entry.engine

    def drop(self, session_id: str) -> bool:
        """Forget a session's engine (memory register included)."""
        with self._lock:
            return self._entries.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
