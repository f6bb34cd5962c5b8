import logging
from typing import Optional

from tokensale.ledger.blueprint import Blueprint, view
from tokensale.ledger.events import TransferEvent
from tokensale.ledger.exception import InvalidAllocationClass, LedgerFail
from tokensale.ledger.storage import StorageKeys
from tokensale.ledger.types import (
    TRANCHE_COUNT,
    Address,
    AllocationClass,
    Amount,
    Timestamp,
    Tranche,
    VestingSchedule,
    is_valid_address,
)

logger = logging.getLogger(__name__)


def parse_allocation_class(value: str | AllocationClass) -> AllocationClass:
    try:
        return AllocationClass(value)
    except ValueError:
        raise InvalidAllocationClass(f"Unknown allocation class: {value!r}") from None


class VestingScheduler(Blueprint):
    """Four-tranche vesting of administratively allocated tokens.

    Release times are anchored at the contract init time:

    - incentive: first tranche after the incentive delay, then every
      incentive period.
    - privateSale: first tranche at init, then every private-sale period.
    - company: first tranche after one company period, then every company
      period.
    """

    def compute_schedule(self, allocation_class: AllocationClass, amount: int) -> VestingSchedule:
        initial_delay, period = self.settings.vesting_timing(allocation_class)
        first_release = self.get_init_time() + initial_delay

        tranche_amount = amount * self.settings.DISTRIBUTION_PERCENTAGE // 100
        # The last tranche absorbs the rounding remainder.
        last_amount = amount - tranche_amount * (TRANCHE_COUNT - 1)

        tranches = tuple(
            Tranche(
                release_time=Timestamp(first_release + period * i),
                amount=Amount(last_amount if i == TRANCHE_COUNT - 1 else tranche_amount),
            )
            for i in range(TRANCHE_COUNT)
        )
        return VestingSchedule(allocation_class=allocation_class, tranches=tranches)  # type: ignore[arg-type]

    def allocate(
        self,
        address: Address,
        allocation_class: str | AllocationClass,
        amount: int,
    ) -> VestingSchedule:
        """Credit `amount` to `address` and lock it under a new schedule.

        Only reachable from privileged administration paths. Replaces any
        schedule `address` already had.
        """
        allocation_class = parse_allocation_class(allocation_class)
        self._validate_address(address)
        if amount < 0:
            raise LedgerFail("Allocation amount must not be negative")

        schedule = self.compute_schedule(allocation_class, amount)
        key = StorageKeys.vesting(address)
        previous = self.storage.get(key)
        if previous is not None:
            logger.warning(
                "replacing %s vesting schedule of %s (%d tokens) with %s schedule of %d tokens",
                previous.allocation_class.value, address.hex(), previous.total,
                allocation_class.value, amount,
            )
        self.storage.put(key, schedule)

        self.token.credit(address, amount)
        self.emit(TransferEvent(from_=None, to=address, amount=Amount(amount)))
        logger.info("allocated %d %s tokens to %s", amount, allocation_class.value, address.hex())
        return schedule

    @view
    def get_schedule(self, address: Address) -> Optional[VestingSchedule]:
        if not is_valid_address(address):
            return None
        return self.storage.get(StorageKeys.vesting(address))

    @view
    def currently_locked(self, address: Address, timestamp: int) -> Amount:
        """Tokens of `address` whose release time is still in the future."""
        schedule = self.get_schedule(address)
        if schedule is None:
            return Amount(0)
        return schedule.locked_at(timestamp)

    @view
    def spendable_balance_of(self, address: Address, timestamp: int) -> Amount:
        balance = self.token.balance_of(address)
        return Amount(max(balance - self.currently_locked(address, timestamp), 0))
