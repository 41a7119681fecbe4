"""In-memory, insertion ordered record store shared by the resource features."""
from __future__ import annotations

from contextlib import contextmanager
from threading import RLock
from typing import Callable, Dict, Generic, Iterator, List, Optional, Protocol, TypeVar


class _Identified(Protocol):
    id: str


RecordT = TypeVar("RecordT", bound=_Identified)


class KeyedStore(Generic[RecordT]):
    """Ordered collection of records keyed by their ``id``.

    Records are kept in insertion order; ``replace`` keeps a record's position.
    Ids come from a counter that only ever moves forward, so an id is never
    handed out twice even after deletes.  The store is process local and is
    lost on restart.
    """

    def __init__(self) -> None:
        self._records: Dict[str, RecordT] = {}
        self._last_id = 0
        self._lock = RLock()

    @contextmanager
    def locked(self) -> Iterator["KeyedStore[RecordT]"]:
        """Hold the store lock across a read-check-write sequence."""

        with self._lock:
            yield self

    def get_all(self) -> List[RecordT]:
        with self._lock:
            return list(self._records.values())

    def get_by_id(self, record_id: str) -> Optional[RecordT]:
        with self._lock:
            return self._records.get(record_id)

    def find(self, predicate: Callable[[RecordT], bool]) -> Optional[RecordT]:
        with self._lock:
            for record in self._records.values():
                if predicate(record):
                    return record
        return None

    def get_count(self) -> int:
        with self._lock:
            return len(self._records)

    def next_id(self) -> str:
        with self._lock:
            self._last_id += 1
            return str(self._last_id)

    def add(self, record: RecordT) -> None:
        with self._lock:
            self._records[record.id] = record
            if record.id.isdigit():
                self._last_id = max(self._last_id, int(record.id))

    def replace(self, record_id: str, record: RecordT) -> bool:
        # dict assignment to an existing key keeps its position
        with self._lock:
            if record_id not in self._records:
                return False
            self._records[record_id] = record
            return True

    def remove(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._last_id = 0

    def __len__(self) -> int:
        return self.get_count()


__all__ = ["KeyedStore"]
