from tokensale.ledger.blueprint import Blueprint, view
from tokensale.ledger.blueprints.whitelist import MAX_TIER, MIN_TIER
from tokensale.ledger.types import SalePhase, Timestamp


class Admission:
    """Verdicts of the participation check"""

    ADMITTED = 0
    NOT_WHITELISTED = 1
    NOT_UNLOCKED = 2
    SUPPLY_EXHAUSTED = 3
    CAP_EXCEEDED = 4  # The only verdict that refunds a native contribution


class ParticipationGate(Blueprint):
    """Time-window and per-tier cap rules of the sale.

    Stateless given a timestamp: nothing here is written to storage.
    """

    @view
    def phase_at(self, timestamp: int) -> int:
        s = self.settings
        if timestamp < s.PRESALE_START_TIME:
            return SalePhase.NOT_STARTED
        if timestamp <= s.PRESALE_END_TIME:
            return SalePhase.PRESALE
        if timestamp < s.PUBLIC_SALE_START_TIME:
            return SalePhase.GAP
        # Contributions are refused from PUBLIC_SALE_END_TIME on.
        if timestamp < s.PUBLIC_SALE_END_TIME:
            return SalePhase.PUBLIC_SALE
        return SalePhase.CLOSED

    @view
    def tier_unlock_time(self, tier: int) -> Timestamp:
        # Every tier unlocks with the presale; tiers only differ in their cap.
        if not MIN_TIER <= tier <= MAX_TIER:
            return Timestamp(0)
        return Timestamp(self.settings.PRESALE_START_TIME)

    @view
    def is_unlocked(self, tier: int, timestamp: int) -> bool:
        if tier <= 0:
            return False
        unlock_time = self.tier_unlock_time(tier)
        return 0 < unlock_time <= timestamp

    @view
    def max_contribution(self, tier: int, timestamp: int) -> int:
        """Maximum whole tokens a member of `tier` may buy at `timestamp`."""
        s = self.settings
        if s.PRESALE_START_TIME <= timestamp <= s.PRESALE_END_TIME:
            return s.PRESALE_TIER_CAPS.get(tier, 0)
        if MIN_TIER <= tier <= MAX_TIER and s.PUBLIC_SALE_START_TIME <= timestamp <= s.PUBLIC_SALE_END_TIME:
            return s.MAXIMUM_CONTRIBUTION_AMOUNT
        return 0

    def check_admissible(
        self,
        tier: int,
        timestamp: int,
        remaining_supply: int,
        prior_total: int,
        contribution: int,
    ) -> int:
        """Evaluate a contribution; amounts are in token base units."""
        if tier <= 0:
            return Admission.NOT_WHITELISTED
        if not self.is_unlocked(tier, timestamp):
            return Admission.NOT_UNLOCKED
        if remaining_supply <= 0:
            return Admission.SUPPLY_EXHAUSTED
        cap = self.max_contribution(tier, timestamp) * self.settings.token_factor
        if prior_total + contribution > cap:
            return Admission.CAP_EXCEEDED
        return Admission.ADMITTED
