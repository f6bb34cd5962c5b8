from typing import Any, Callable, Optional, TypeVar

from tokensale.conf.settings import SaleSettings
from tokensale.ledger.context import Context
from tokensale.ledger.events import Event
from tokensale.ledger.exception import InvalidAddress, NotInitialized, Unauthorized
from tokensale.ledger.storage import ChangesTracker, StorageKeys, TokenLedger
from tokensale.ledger.types import Address, Timestamp, is_valid_address

T = TypeVar("T", bound=Callable[..., Any])

PUBLIC_ATTR = "_is_public"
VIEW_ATTR = "_is_view"


def public(fn: T) -> T:
    """Mark a method as a state-changing entry point."""
    setattr(fn, PUBLIC_ATTR, True)
    return fn


def view(fn: T) -> T:
    """Mark a method as a read-only entry point."""
    setattr(fn, VIEW_ATTR, True)
    return fn


class Blueprint:
    """Base class of the sale components.

    A blueprint instance is bound to the changes tracker of a single
    operation; every read and write goes through it, so a failed operation
    leaves no trace.
    """

    def __init__(self, storage: ChangesTracker, settings: SaleSettings) -> None:
        self.storage = storage
        self.settings = settings
        self.token = TokenLedger(storage)

    def emit(self, event: Event) -> None:
        self.storage.emit(event)

    def _validate_address(self, address: Any, what: str = "address") -> Address:
        if not is_valid_address(address):
            raise InvalidAddress(f"Invalid {what}")
        return Address(address)

    @view
    def is_initialized(self) -> bool:
        return self.storage.has(StorageKeys.INIT_TIME)

    def _require_initialized(self) -> None:
        if not self.is_initialized():
            raise NotInitialized("Smart contract not initialised")

    @view
    def get_init_time(self) -> Timestamp:
        return Timestamp(self.storage.get(StorageKeys.INIT_TIME, 0))

    @view
    def get_admin(self) -> Optional[Address]:
        """Stored admin, or the configured initial admin before init."""
        return self.storage.get(StorageKeys.ADMIN, self.settings.INITIAL_ADMIN_ACCOUNT)

    def _only_admin(self, ctx: Context) -> None:
        if not ctx.check_witness(self.get_admin()):
            raise Unauthorized("Only admin can call this method")
