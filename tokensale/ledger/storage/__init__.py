from tokensale.ledger.storage.changes_tracker import ChangesTracker
from tokensale.ledger.storage.memory_storage import MemoryLedgerStorage
from tokensale.ledger.storage.storage import LedgerStorage, StorageKeys
from tokensale.ledger.storage.token import TokenLedger

__all__ = [
    "ChangesTracker",
    "LedgerStorage",
    "MemoryLedgerStorage",
    "StorageKeys",
    "TokenLedger",
]
