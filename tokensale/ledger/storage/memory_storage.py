from typing import Any, Iterator

from tokensale.ledger.storage.storage import LedgerStorage


class MemoryLedgerStorage(LedgerStorage):
    """In-memory storage used by tests and local simulations."""

    def __init__(self) -> None:
        self.data: dict[bytes, Any] = {}

    def get(self, key: bytes, default: Any = None) -> Any:
        return self.data.get(key, default)

    def put(self, key: bytes, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: bytes) -> None:
        self.data.pop(key, None)

    def iter_prefix(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        for key in sorted(self.data):
            if key.startswith(prefix):
                yield key, self.data[key]
