from typing import NamedTuple, Optional, Union

from tokensale.ledger.types import Address, Amount


class TransferEvent(NamedTuple):
    """`transfer(from, to, amount)`; `from_` is None for minted tokens."""

    from_: Optional[Address]
    to: Address
    amount: Amount


class RefundEvent(NamedTuple):
    """Native refund in both native currencies."""

    to: Address
    neo: int
    gas: int


class RefundEthEvent(NamedTuple):
    """Bridged refund addressed to the foreign-chain sender."""

    eth_address: str
    amount: int


Event = Union[TransferEvent, RefundEvent, RefundEthEvent]
