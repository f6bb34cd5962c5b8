from typing import Any, Iterator

from tokensale.ledger.events import Event
from tokensale.ledger.storage.storage import LedgerStorage

_DELETED = object()


class ChangesTracker(LedgerStorage):
    """Buffers the writes and events of a single operation.

    Reads fall through to the wrapped storage. Nothing reaches it until
    `commit()` is called; dropping the tracker discards the operation.
    """

    def __init__(self, storage: LedgerStorage) -> None:
        self.storage = storage
        self.changes: dict[bytes, Any] = {}
        self.events: list[Event] = []
        self._committed = False

    def get(self, key: bytes, default: Any = None) -> Any:
        if key in self.changes:
            value = self.changes[key]
            return default if value is _DELETED else value
        return self.storage.get(key, default)

    def put(self, key: bytes, value: Any) -> None:
        self.changes[key] = value

    def delete(self, key: bytes) -> None:
        self.changes[key] = _DELETED

    def iter_prefix(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        merged = dict(self.storage.iter_prefix(prefix))
        for key, value in self.changes.items():
            if not key.startswith(prefix):
                continue
            if value is _DELETED:
                merged.pop(key, None)
            else:
                merged[key] = value
        for key in sorted(merged):
            yield key, merged[key]

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def has_changes(self) -> bool:
        return bool(self.changes) or bool(self.events)

    def commit(self) -> list[Event]:
        """Flush every buffered change to the wrapped storage."""
        assert not self._committed, "changes already committed"
        for key, value in self.changes.items():
            if value is _DELETED:
                self.storage.delete(key)
            else:
                self.storage.put(key, value)
        self._committed = True
        return list(self.events)
