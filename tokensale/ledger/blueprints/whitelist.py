import logging

from tokensale.ledger.blueprint import Blueprint, public, view
from tokensale.ledger.context import Context
from tokensale.ledger.exception import InvalidTier, Unauthorized
from tokensale.ledger.storage import StorageKeys
from tokensale.ledger.types import Address, is_valid_address

logger = logging.getLogger(__name__)

MIN_TIER = 1
MAX_TIER = 4


class WhitelistRegistry(Blueprint):
    """KYC whitelist mapping an identity to its participation tier."""

    def _only_kyc_middleware(self, ctx: Context) -> None:
        if not ctx.check_witness(self.settings.KYC_MIDDLEWARE_KEY):
            raise Unauthorized("Only the KYC middleware can change the whitelist")

    @public
    def add_address(self, ctx: Context, address: Address, tier: int) -> None:
        """Whitelist `address` in `tier`, replacing any previous tier."""
        self._validate_address(address)
        if not MIN_TIER <= tier <= MAX_TIER:
            raise InvalidTier(f"Tier must be between {MIN_TIER} and {MAX_TIER}")
        self._only_kyc_middleware(ctx)

        self.storage.put(StorageKeys.whitelist(address), tier)
        logger.debug("whitelisted %s in tier %d", address.hex(), tier)

    @public
    def revoke_address(self, ctx: Context, address: Address) -> None:
        self._validate_address(address)
        self._only_kyc_middleware(ctx)

        self.storage.delete(StorageKeys.whitelist(address))
        logger.debug("revoked %s from whitelist", address.hex())

    @view
    def tier_of(self, address: Address) -> int:
        """Return the tier of `address`, 0 when not whitelisted."""
        if not is_valid_address(address):
            return 0
        return self.storage.get(StorageKeys.whitelist(address), 0)

    @view
    def is_whitelisted(self, address: Address) -> bool:
        return self.tier_of(address) > 0
