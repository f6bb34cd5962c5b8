from abc import ABC, abstractmethod
from typing import Any, Iterator

from tokensale.ledger.types import Address, CurrencyChannel

_MISSING = object()


class StorageKeys:
    """Namespaced keys for every persisted entity.

    Single-valued entries use a fixed key; per-identity maps use a prefix
    followed by the 20-byte identity.
    """

    ADMIN = b"admin"
    INIT_TIME = b"init_time"
    TOTAL_SUPPLY = b"total_supply"
    PRIVATE_SALE_ALLOCATED = b"presale_allocated"
    PRIVATE_SALE_LOCKED = b"presale_locked"
    UNSOLD_TOKENS_CLAIMED = b"unsold_claimed"
    TRANSFER_FROM_WHITELISTING = b"transfer_from_checked"

    BALANCE_PREFIX = b"balance:"
    SALE_CONTRIBUTION_PREFIX = b"contribution:"
    LAST_TX_PREFIX = b"last_tx:"
    WHITELIST_PREFIX = b"kyc:"
    VESTING_PREFIX = b"vesting:"
    TRANSFER_FROM_LIST_PREFIX = b"transfer_from:"

    @staticmethod
    def balance(address: Address) -> bytes:
        return StorageKeys.BALANCE_PREFIX + address

    @staticmethod
    def sale_contribution(address: Address) -> bytes:
        return StorageKeys.SALE_CONTRIBUTION_PREFIX + address

    @staticmethod
    def last_tx(channel: CurrencyChannel) -> bytes:
        return StorageKeys.LAST_TX_PREFIX + channel.value.encode("ascii")

    @staticmethod
    def whitelist(address: Address) -> bytes:
        return StorageKeys.WHITELIST_PREFIX + address

    @staticmethod
    def vesting(address: Address) -> bytes:
        return StorageKeys.VESTING_PREFIX + address

    @staticmethod
    def transfer_from(address: Address) -> bytes:
        return StorageKeys.TRANSFER_FROM_LIST_PREFIX + address


class LedgerStorage(ABC):
    """Key-value store exclusively owned by the sale ledger."""

    @abstractmethod
    def get(self, key: bytes, default: Any = None) -> Any:
        raise NotImplementedError

    @abstractmethod
    def put(self, key: bytes, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def iter_prefix(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        """Iterate over (key, value) pairs whose key starts with `prefix`."""
        raise NotImplementedError

    def has(self, key: bytes) -> bool:
        return self.get(key, _MISSING) is not _MISSING
