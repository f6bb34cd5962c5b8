import logging
from typing import Any, Mapping, Optional

from tokensale.conf.get_settings import get_global_settings
from tokensale.conf.settings import SaleSettings
from tokensale.ledger.blueprint import PUBLIC_ATTR, VIEW_ATTR, Blueprint
from tokensale.ledger.blueprints import BLUEPRINTS
from tokensale.ledger.commands import BaseCommand, parse_command
from tokensale.ledger.context import Context
from tokensale.ledger.events import Event
from tokensale.ledger.exception import InvalidCommand, LedgerFail, NotInitialized, Unauthorized
from tokensale.ledger.storage import ChangesTracker, LedgerStorage

logger = logging.getLogger(__name__)


class Runner:
    """Executes blueprint methods against a ledger storage.

    Every public call runs on a fresh `ChangesTracker`. Its writes and events
    reach the storage only when the method returns normally; a `LedgerFail`
    propagates to the caller and the tracker is dropped with everything it
    buffered.

    `execute` is the host-facing boundary: it never raises `LedgerFail` and
    reports every rejection as `False`.
    """

    def __init__(self, storage: LedgerStorage, settings: Optional[SaleSettings] = None) -> None:
        self.storage = storage
        self.settings = settings if settings is not None else get_global_settings()
        self.events: list[Event] = []

    def _get_blueprint(self, blueprint_name: str, storage: ChangesTracker) -> Blueprint:
        blueprint_class = BLUEPRINTS.get(blueprint_name)
        if blueprint_class is None:
            raise InvalidCommand(f"Unknown blueprint: {blueprint_name}")
        return blueprint_class(storage, self.settings)

    def _get_method(self, blueprint: Blueprint, method_name: str, marker: str) -> Any:
        method = getattr(blueprint, method_name, None)
        if method is None or not getattr(method, marker, False):
            raise InvalidCommand(f"{type(blueprint).__name__}.{method_name} is not callable from outside")
        return method

    def call_public_method(self, blueprint_name: str, method_name: str, ctx: Context, *args: Any, **kwargs: Any) -> Any:
        changes = ChangesTracker(self.storage)
        blueprint = self._get_blueprint(blueprint_name, changes)
        method = self._get_method(blueprint, method_name, PUBLIC_ATTR)

        result = method(ctx, *args, **kwargs)

        events = changes.commit()
        self.events.extend(events)
        logger.debug("%s.%s committed with %d event(s)", blueprint_name, method_name, len(events))
        return result

    def call_view_method(self, blueprint_name: str, method_name: str, *args: Any, **kwargs: Any) -> Any:
        # Views read through a tracker that is never committed.
        blueprint = self._get_blueprint(blueprint_name, ChangesTracker(self.storage))
        method = self._get_method(blueprint, method_name, VIEW_ATTR)
        return method(*args, **kwargs)

    def is_initialized(self) -> bool:
        return self.call_view_method("administration", "is_initialized")

    def execute(self, ctx: Context, command: BaseCommand) -> Any:
        """Run a validated command.

        Returns the view result for queries. For operations, returns the
        method's boolean outcome, True when it returns nothing, and False when
        it was rejected.
        """
        try:
            if not command.allowed_before_init and not self.is_initialized():
                raise NotInitialized("Smart contract not initialised")
            args = command.args(ctx)
            if command.is_view:
                return self.call_view_method(command.blueprint, command.method, *args)
            result = self.call_public_method(command.blueprint, command.method, ctx, *args)
        except LedgerFail as e:
            level = logging.WARNING if isinstance(e, Unauthorized) else logging.INFO
            logger.log(level, "%s rejected: %s", command.operation, e)
            return False
        return True if result is None else result

    def execute_raw(self, ctx: Context, data: Mapping[str, Any]) -> Any:
        """Validate an untyped `{"operation": ...}` mapping and run it."""
        try:
            command = parse_command(data)
        except InvalidCommand as e:
            logger.warning("%s", e)
            return False
        return self.execute(ctx, command)
