from __future__ import annotations

import threading
from pathlib import Path


class PathLockRegistry:
    """
    Hands out one re-entrant lock per resolved file path, so a collection file
    can be loaded, modified and saved under a single critical section.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = str(path.resolve())
        with self._guard:
            return self._locks.setdefault(key, threading.RLock())


GLOBAL_PATH_LOCKS = PathLockRegistry()
