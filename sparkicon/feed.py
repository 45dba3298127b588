from __future__ import annotations

import logging
import threading
from typing import Callable

from .errors import EncodingError
from .shared import SharedGraph

LOGGER = logging.getLogger(__name__)

SampleProvider = Callable[[], int | None]
IconSink = Callable[[bytes], None]


class SampleFeedThread:
    """Polls a sample provider and refreshes the icon.

    The first update runs as soon as the thread starts. After that an update
    runs every ``interval_s`` seconds and whenever ``request_update()`` is
    called. ``interval_s`` of ``None`` or ``0`` disables the timer, leaving
    only requested updates.

    A provider returning ``None`` skips the push but the icon is still
    re-encoded. A provider failure is logged and kept in ``last_error``; the
    current grid is still delivered and the feed keeps running. Encoding
    failures skip the tick. Only a sink failure stops the thread.
    """

    def __init__(
        self,
        graph: SharedGraph,
        provider: SampleProvider,
        sink: IconSink,
        interval_s: float | None = 60.0,
        max_ticks: int | None = None,
    ) -> None:
        if interval_s is not None and interval_s < 0:
            raise ValueError("interval_s must be >= 0")
        if max_ticks is not None and max_ticks <= 0:
            raise ValueError("max_ticks must be > 0")
        self._graph = graph
        self._provider = provider
        self._sink = sink
        self._interval_s = interval_s or None
        self._max_ticks = max_ticks
        self._stop = threading.Event()
        self._wake = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_error: Exception | None = None
        self._ticks = 0

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def manual_only(self) -> bool:
        return self._interval_s is None

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._wake.clear()
        self._thread = threading.Thread(target=self._run, name="sparkicon-feed", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        self._wake.set()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

    def join(self, timeout: float | None = None) -> None:
        if self._thread:
            self._thread.join(timeout=timeout)

    def request_update(self) -> None:
        """Wake the feed for an immediate update, e.g. from a signal handler or menu action."""
        self._wake.set()

    def tick(self) -> bool:
        """Run one poll/push/encode cycle. Returns False if no icon was delivered."""
        self._ticks += 1
        try:
            value = self._provider()
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("sample provider failed, keeping previous graph: %s", exc)
            self._last_error = exc
            value = None
        if value is not None:
            self._graph.push_sample(value)
        try:
            icon = self._graph.encode()
        except EncodingError as exc:
            LOGGER.warning("skipping icon update: %s", exc)
            return False
        self._sink(icon)
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception as exc:  # noqa: BLE001
                LOGGER.exception("sample feed stopped: %s", exc)
                self._last_error = exc
                break
            if self._max_ticks is not None and self._ticks >= self._max_ticks:
                break
            self._wake.wait(self._interval_s)
            self._wake.clear()
