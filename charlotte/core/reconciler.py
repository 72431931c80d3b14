# charlotte/core/reconciler.py
"""
List-state reconciler.

Keeps an in-memory, most-recent-first list in step with remote writes
using only the single affected record:

  created -> prepended
  updated -> replaced in place (whole record), order preserved
  deleted -> removed by id

Edits made by other sessions are not merged; they show up on the next
full reload.
"""
import threading
from typing import Any, Generic, Iterable, Protocol, TypeVar


class HasId(Protocol):
    id: Any

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = False) -> Any: ...


R = TypeVar("R", bound=HasId)


def prepend(items: list[R], record: R) -> list[R]:
    # A stale copy of the same id would become a duplicate
    return [record, *(item for item in items if item.id != record.id)]


def replace(items: list[R], record: R) -> list[R]:
    return [record if item.id == record.id else item for item in items]


def remove(items: list[R], record_id: Any) -> list[R]:
    return [item for item in items if item.id != record_id]


def patch(items: list[R], record_id: Any, **fields: Any) -> list[R]:
    """
    Replace only ``fields`` of the matching record.

    Used when the remote write answers with the bare row while the local
    copy carries expanded relations that must survive.
    """
    return [
        item.model_copy(update=fields) if item.id == record_id else item
        for item in items
    ]


class ListState(Generic[R]):
    """
    A reconciled collection.

    ``loaded`` stays False until the first full load; writes applied before
    that are ignored since the next load brings them in anyway.
    """

    def __init__(self) -> None:
        self._items: list[R] = []
        self._lock = threading.Lock()
        self.loaded = False

    @property
    def items(self) -> list[R]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def load(self, records: Iterable[R]) -> None:
        with self._lock:
            self._items = list(records)
            self.loaded = True

    def clear(self) -> None:
        with self._lock:
            self._items = []
            self.loaded = False

    def apply_created(self, record: R) -> None:
        with self._lock:
            if self.loaded:
                self._items = prepend(self._items, record)

    def apply_updated(self, record: R) -> None:
        with self._lock:
            self._items = replace(self._items, record)

    def apply_deleted(self, record_id: Any) -> None:
        with self._lock:
            self._items = remove(self._items, record_id)
