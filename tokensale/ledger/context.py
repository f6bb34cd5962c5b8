from dataclasses import dataclass, field
from typing import Mapping, Optional

from tokensale.ledger.types import Address, Currency, Timestamp, TxId


@dataclass(frozen=True)
class Context:
    """Already-validated transaction context supplied by the host.

    `witnesses` holds every identity whose signature the host verified for
    this transaction; `received` holds the native amounts attached to it, in
    each currency's smallest unit.
    """

    timestamp: Timestamp
    address: Optional[Address] = None
    tx_id: TxId = TxId(b"")
    witnesses: frozenset[bytes] = frozenset()
    received: Mapping[Currency, int] = field(default_factory=dict)

    def check_witness(self, address: Optional[bytes]) -> bool:
        return address is not None and address in self.witnesses

    def get_received(self, currency: Currency) -> int:
        return self.received.get(currency, 0)
