"""In-memory store of one-time login codes.

Codes expire after ``ttl`` seconds. A daemon thread evicts stale entries every
``sweep_interval`` seconds; ``verify`` also rejects them on read.
"""

import threading
import time

import structlog

logger = structlog.get_logger(__name__)


class OTPStore:
    def __init__(self, ttl: float = 3600, sweep_interval: float = 600, clock=time.monotonic):
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def put(self, key: str, code: str) -> None:
        with self._lock:
            self._entries[key] = (code, self._clock())

    def verify(self, key: str, code: str) -> bool:
        """Check ``code`` for ``key``. The entry is consumed whatever the outcome."""
        now = self._clock()
        with self._lock:
            entry = self._entries.pop(key, None)
        if entry is None:
            return False
        stored, issued_at = entry
        return stored == code and now - issued_at <= self.ttl

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, issued_at) in self._entries.items() if now - issued_at > self.ttl]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Evicted expired login codes", count=len(expired))
        return len(expired)

    def start(self) -> None:
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop.clear()
        self._sweeper = threading.Thread(target=self._run, name="otp-sweeper", daemon=True)
        self._sweeper.start()

    def stop(self) -> None:
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=5)
            self._sweeper = None

    def _run(self):
        while not self._stop.wait(self.sweep_interval):
            self.sweep()
