import logging
from typing import NamedTuple

from tokensale.ledger.blueprint import Blueprint, public, view
from tokensale.ledger.blueprints.vesting import VestingScheduler, parse_allocation_class
from tokensale.ledger.context import Context
from tokensale.ledger.events import TransferEvent
from tokensale.ledger.exception import (
    AllocationExceedsPool,
    AlreadyInitialized,
    LedgerFail,
    PrivateSaleLocked,
    SaleNotEnded,
    UnsoldTokensAlreadyClaimed,
)
from tokensale.ledger.storage import StorageKeys
from tokensale.ledger.types import Address, AllocationClass, Amount, Timestamp, is_valid_address

logger = logging.getLogger(__name__)


class PrivateSalePoolInfo(NamedTuple):
    allocated: int
    cap: int
    remaining: int
    locked_at: int


class Administration(Blueprint):
    """Privileged operations of the sale.

    Every public method requires the admin witness. Initialization,
    the private-sale pool lock and the unsold-token claim are one-way: once
    done they fail on every later call.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.vesting = VestingScheduler(self.storage, self.settings)

    def _private_sale_cap(self) -> int:
        return self.settings.LOCKED_TOKEN_ALLOCATION_AMOUNT * self.settings.token_factor

    @public
    def initialize(self, ctx: Context) -> None:
        """Initialise the sale: mint the immediate reserve and reserve the pool."""
        self._only_admin(ctx)
        if self.is_initialized():
            logger.info("contract already initialised")
            raise AlreadyInitialized("Contract can only be initialised once")

        self.storage.put(StorageKeys.INIT_TIME, Timestamp(ctx.timestamp))

        immediate = self.settings.IMMEDIATE_COMPANY_RESERVE * self.settings.token_factor
        project_key = self.settings.PROJECT_KEY
        self.token.credit(project_key, immediate)
        self.emit(TransferEvent(from_=None, to=project_key, amount=Amount(immediate)))

        # Total supply includes the whole locked pool from here on.
        self.token.set_total_supply(immediate + self._private_sale_cap())

        self.storage.put(StorageKeys.ADMIN, self.settings.INITIAL_ADMIN_ACCOUNT)
        self.storage.put(StorageKeys.TRANSFER_FROM_WHITELISTING, self.settings.WHITELIST_TRANSFER_FROM_LISTINGS)
        logger.info("contract initialisation complete at %d", ctx.timestamp)

    @public
    def allocate_private_sale(
        self,
        ctx: Context,
        address: Address,
        allocation_class: str | AllocationClass,
        amount: int,
    ) -> None:
        """Allocate `amount` whole tokens from the locked pool under vesting."""
        self._only_admin(ctx)
        self._require_initialized()
        if self.private_sale_locked_at() > 0:
            logger.info("private sale allocation is locked")
            raise PrivateSaleLocked("Private sale allocation is locked")

        allocation_class = parse_allocation_class(allocation_class)
        if amount <= 0:
            raise LedgerFail("Allocation amount must be positive")

        scaled = amount * self.settings.token_factor
        allocated = self.private_sale_allocated()
        if allocated + scaled > self._private_sale_cap():
            logger.info("allocation of %d would exceed the private sale pool", scaled)
            raise AllocationExceedsPool("Purchase will exceed max allocation")

        self.vesting.allocate(address, allocation_class, scaled)
        self.storage.put(StorageKeys.PRIVATE_SALE_ALLOCATED, Amount(allocated + scaled))

    @public
    def lock_private_sale_allocation(self, ctx: Context) -> None:
        self._only_admin(ctx)
        self._require_initialized()
        if self.private_sale_locked_at() > 0:
            return
        self.storage.put(StorageKeys.PRIVATE_SALE_LOCKED, Timestamp(ctx.timestamp))
        logger.info("further private sale allocations locked")

    @public
    def claim_unsold_tokens(self, ctx: Context) -> None:
        """Allocate the supply headroom left after the sale to the company fund."""
        self._only_admin(ctx)
        self._require_initialized()
        if ctx.timestamp < self.settings.PUBLIC_SALE_END_TIME:
            raise SaleNotEnded("Public sale has not ended")
        if self.unsold_tokens_claimed():
            raise UnsoldTokensAlreadyClaimed("Unsold tokens already claimed")

        fund = self.settings.ADDITIONAL_COMPANY_TOKEN_FUND
        remaining = self.settings.max_mintable_supply - self.token.total_supply()
        self.storage.put(StorageKeys.UNSOLD_TOKENS_CLAIMED, True)
        if remaining <= 0:
            # Nothing to claim; the fund keeps its current schedule.
            logger.info("no unsold tokens left to claim")
            return
        self.vesting.allocate(fund, AllocationClass.COMPANY, remaining)
        self.token.increase_total_supply(remaining)
        logger.info("unsold tokens allocated to %s: %d", fund.hex(), remaining)

    @public
    def update_admin(self, ctx: Context, new_admin: Address) -> None:
        self._only_admin(ctx)
        self._validate_address(new_admin, "admin address")
        self.storage.put(StorageKeys.ADMIN, new_admin)
        logger.info("admin changed to %s", new_admin.hex())

    @public
    def enable_transfer_from_whitelisting(self, ctx: Context, enabled: bool) -> None:
        self._only_admin(ctx)
        self.storage.put(StorageKeys.TRANSFER_FROM_WHITELISTING, enabled)

    @public
    def whitelist_transfer_from_add(self, ctx: Context, address: Address) -> None:
        self._only_admin(ctx)
        self._validate_address(address)
        self.storage.put(StorageKeys.transfer_from(address), True)
        logger.info("added %s to the transfer-from whitelist", address.hex())

    @public
    def whitelist_transfer_from_remove(self, ctx: Context, address: Address) -> None:
        self._only_admin(ctx)
        self._validate_address(address)
        self.storage.delete(StorageKeys.transfer_from(address))
        logger.info("removed %s from the transfer-from whitelist", address.hex())

    @view
    def private_sale_allocated(self) -> Amount:
        return Amount(self.storage.get(StorageKeys.PRIVATE_SALE_ALLOCATED, 0))

    @view
    def private_sale_locked_at(self) -> Timestamp:
        """Timestamp the pool was locked at, 0 while unlocked."""
        return Timestamp(self.storage.get(StorageKeys.PRIVATE_SALE_LOCKED, 0))

    @view
    def get_private_sale_pool_info(self) -> PrivateSalePoolInfo:
        allocated = self.private_sale_allocated()
        cap = self._private_sale_cap()
        return PrivateSalePoolInfo(
            allocated=allocated,
            cap=cap,
            remaining=cap - allocated,
            locked_at=self.private_sale_locked_at(),
        )

    @view
    def unsold_tokens_claimed(self) -> bool:
        return self.storage.get(StorageKeys.UNSOLD_TOKENS_CLAIMED, False)

    @view
    def transfer_from_whitelisting_enabled(self) -> bool:
        return self.storage.get(StorageKeys.TRANSFER_FROM_WHITELISTING, False)

    @view
    def is_transfer_from_whitelisted(self, address: Address) -> bool:
        if not is_valid_address(address):
            return False
        return self.storage.get(StorageKeys.transfer_from(address), False)
