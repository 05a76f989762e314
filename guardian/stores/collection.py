"""
guardian/stores/collection.py
Whole-collection persistence: every operation loads the full list,
mutates it in memory and writes the full list back.

JsonCollection   - one JSON array per file (the deployed format)
MemoryCollection - same interface, held in memory (tests / embedding)

Each collection owns a re-entrant lock. update() runs the whole
read-modify-write under it, so two request threads cannot clobber each
other's changes. Writes go to a temp file and are swapped in with
os.replace() - a failed write leaves the previous file intact.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from guardian.errors import StorageUnavailable

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
T = TypeVar('T')


# ── HELPERS ──────────────────────────────────────────────────

def utc_now_iso() -> str:
    """Current UTC time, ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def next_id(records: Iterable[Record]) -> int:
    """
    Epoch-millisecond id, bumped past every existing id.
    Rapid creates within one millisecond still get distinct, increasing ids.
    """
    now_ms = time.time_ns() // 1_000_000
    last = max((r.get('id') for r in records if isinstance(r.get('id'), int)), default=0)
    return max(now_ms, last + 1)


# ── BASE ─────────────────────────────────────────────────────

class Collection:
    """load_all / save_all / initialize contract plus a locked update()."""

    name: str = 'collection'

    def __init__(self, defaults: Optional[List[Record]] = None):
        self._defaults: List[Record] = copy.deepcopy(defaults or [])
        self.lock = threading.RLock()

    def defaults(self) -> List[Record]:
        return copy.deepcopy(self._defaults)

    def initialize(self) -> None:
        raise NotImplementedError

    def load_all(self) -> List[Record]:
        raise NotImplementedError

    def save_all(self, records: List[Record]) -> None:
        raise NotImplementedError

    def update(self, fn: Callable[[List[Record]], T]) -> T:
        """
        Load, call fn(records), save, return fn's result - all under the lock.
        If fn raises, nothing is written.
        """
        with self.lock:
            records = self.load_all()
            result = fn(records)
            self.save_all(records)
            return result


# ── JSON FILE ────────────────────────────────────────────────

class JsonCollection(Collection):

    def __init__(self, path: Path, defaults: Optional[List[Record]] = None):
        super().__init__(defaults)
        self.path = Path(path)
        self.name = self.path.stem

    def initialize(self) -> None:
        """Create the data directory and seed the file with defaults if absent."""
        with self.lock:
            if self.path.exists():
                return
            self.save_all(self.defaults())
            logger.info(f"Initialized {self.path} with {len(self._defaults)} default record(s)")

    def load_all(self) -> List[Record]:
        with self.lock:
            if not self.path.exists():
                return self.defaults()
            try:
                data = json.loads(self.path.read_text(encoding='utf-8'))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.error(f"Error reading {self.path}: {e}")
                raise StorageUnavailable(self.path, str(e)) from e
            if not isinstance(data, list):
                logger.error(f"Error reading {self.path}: expected a JSON array")
                raise StorageUnavailable(self.path, 'expected a JSON array')
            return data

    def save_all(self, records: List[Record]) -> None:
        with self.lock:
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix='.tmp', dir=str(self.path.parent),
                )
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(records, f, indent=2)
                os.replace(tmp_name, self.path)
                tmp_name = None
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"Error writing {self.path}: {e}")
                raise StorageUnavailable(self.path, str(e)) from e
            finally:
                if tmp_name is not None:
                    Path(tmp_name).unlink(missing_ok=True)


# ── IN-MEMORY ────────────────────────────────────────────────

class MemoryCollection(Collection):

    def __init__(self, defaults: Optional[List[Record]] = None, name: str = 'memory'):
        super().__init__(defaults)
        self.name = name
        self._records: Optional[List[Record]] = None

    def initialize(self) -> None:
        with self.lock:
            if self._records is None:
                self._records = self.defaults()

    def load_all(self) -> List[Record]:
        with self.lock:
            if self._records is None:
                return self.defaults()
            return copy.deepcopy(self._records)

    def save_all(self, records: List[Record]) -> None:
        with self.lock:
            self._records = copy.deepcopy(records)
