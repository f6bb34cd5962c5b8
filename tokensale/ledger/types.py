from enum import Enum
from typing import NamedTuple, NewType

Address = NewType("Address", bytes)
Amount = NewType("Amount", int)
Timestamp = NewType("Timestamp", int)
TxId = NewType("TxId", bytes)

ADDRESS_LEN = 20
TRANCHE_COUNT = 4


class CurrencyChannel(str, Enum):
    """Independent ingress channels, each with its own idempotency marker."""

    NATIVE = "native"
    BRIDGED = "bridged"


class Currency(str, Enum):
    NEO = "neo"
    GAS = "gas"
    ETH = "eth"


class AllocationClass(str, Enum):
    """Vesting classes for administratively allocated tokens."""

    INCENTIVE = "incentive"
    PRIVATE_SALE = "privateSale"
    COMPANY = "company"


class SalePhase:
    """Sale phases derived from the block timestamp"""

    NOT_STARTED = 0  # Before the presale window
    PRESALE = 1  # Whitelisted tiers with per-tier caps
    GAP = 2  # Between presale end and public sale start
    PUBLIC_SALE = 3  # Whitelisted tiers with the uniform cap
    CLOSED = 4  # Public sale ended


class Tranche(NamedTuple):
    release_time: Timestamp
    amount: Amount


class VestingSchedule(NamedTuple):
    """Four ordered release tranches for one allocation."""

    allocation_class: AllocationClass
    tranches: tuple[Tranche, Tranche, Tranche, Tranche]

    @property
    def total(self) -> Amount:
        return Amount(sum(tranche.amount for tranche in self.tranches))

    def locked_at(self, timestamp: int) -> Amount:
        """Sum of tranches whose release time has not been reached."""
        return Amount(sum(t.amount for t in self.tranches if timestamp < t.release_time))


def is_valid_address(address: object) -> bool:
    return isinstance(address, bytes) and len(address) == ADDRESS_LEN
