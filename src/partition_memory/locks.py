from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class EngineLock:
    """
    Readers/writer lock guarding an AllocationEngine.

    Reports take the shared side; submit and release (including the retry
    sweep that follows a release) take the exclusive side, so no submitter
    can see a partition freed by a release before that release's sweep ends.
    """

    def __init__(self) -> None:
        self._readers = 0
        self._readers_lock = threading.Lock()
        self._state_lock = threading.Lock()

    @contextmanager
    def shared(self) -> Iterator[None]:
        with self._readers_lock:
            self._readers += 1
            if self._readers == 1:
                self._state_lock.acquire()
        try:
            yield
        finally:
            with self._readers_lock:
                self._readers -= 1
                if self._readers == 0:
                    self._state_lock.release()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._state_lock:
            yield
