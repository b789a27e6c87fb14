"""Atomic JSON document file shared by the repositories.

A store is a single JSON object ``{key: document}``. Every repository instance
pointing at the same file shares one lock, so read-modify-write sequences
inside ``transaction()`` are serialised within the process.
"""
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterator

logger = logging.getLogger(__name__)

_locks: Dict[str, Lock] = {}
_locks_guard = Lock()


def _lock_for(path: Path) -> Lock:
    with _locks_guard:
        return _locks.setdefault(str(path), Lock())


class JsonStore:
    def __init__(self, path):
        self.path = Path(path)
        self._lock = _lock_for(self.path.resolve())

    def read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", self.path, e)
            raise
        return data if isinstance(data, dict) else {}

    def write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.stem}_", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(data, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """Yield the current documents; they are written back if the block succeeds."""
        with self._lock:
            data = self.read()
            yield data
            self.write(data)

    @contextmanager
    def snapshot(self) -> Iterator[Dict[str, Any]]:
        with self._lock:
            yield self.read()
