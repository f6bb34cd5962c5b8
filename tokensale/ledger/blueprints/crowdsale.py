import logging
from typing import NamedTuple, Optional

from tokensale.ledger.blueprint import Blueprint, public, view
from tokensale.ledger.blueprints.participation import Admission, ParticipationGate
from tokensale.ledger.blueprints.vesting import VestingScheduler
from tokensale.ledger.blueprints.whitelist import WhitelistRegistry
from tokensale.ledger.context import Context
from tokensale.ledger.events import RefundEthEvent, RefundEvent, TransferEvent
from tokensale.ledger.exception import DuplicateTransaction, NotEligible, SaleClosed, Unauthorized
from tokensale.ledger.storage import StorageKeys
from tokensale.ledger.types import Address, Amount, Currency, CurrencyChannel, TxId, is_valid_address

logger = logging.getLogger(__name__)

NATIVE_CURRENCIES = (Currency.NEO, Currency.GAS)


class SaleInfo(NamedTuple):
    """General sale information."""

    token_name: str
    token_symbol: str
    decimals: int
    phase: int
    total_supply: int
    max_supply: int
    available: int


class ParticipantInfo(NamedTuple):
    """Participant-specific information."""

    tier: int
    balance: int
    locked: int
    spendable: int
    contributed: int
    max_contribution: int


class CrowdsaleErrors:
    """Common diagnostic messages"""

    NOT_WHITELISTED = "sender is not whitelisted"
    NOT_UNLOCKED = "sender cannot participate yet"
    SUPPLY_EXHAUSTED = "crowdsale available amount is exhausted"
    CAP_EXCEEDED = "purchase will exceed the max contribution cap"
    SALE_CLOSED = "token sale is closed"
    DUPLICATE_TX = "not processing duplicate tx"
    BELOW_MINIMUM = "contribution below the minimum"
    NOTHING_RECEIVED = "no accepted contribution received"


_ADMISSION_ERRORS = {
    Admission.NOT_WHITELISTED: CrowdsaleErrors.NOT_WHITELISTED,
    Admission.NOT_UNLOCKED: CrowdsaleErrors.NOT_UNLOCKED,
    Admission.SUPPLY_EXHAUSTED: CrowdsaleErrors.SUPPLY_EXHAUSTED,
    Admission.CAP_EXCEEDED: CrowdsaleErrors.CAP_EXCEEDED,
}


class CrowdsaleLedger(Blueprint):
    """Contribution processing against the hard-capped supply.

    Contributions arrive on two channels: native (NEO/GAS attached to the
    transaction) and bridged (ETH relayed by the contribution listener).
    Each channel remembers only the last transaction it processed.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.whitelist = WhitelistRegistry(self.storage, self.settings)
        self.gate = ParticipationGate(self.storage, self.settings)
        self.vesting = VestingScheduler(self.storage, self.settings)

    def _tokens_for(self, currency: Currency, amount: int) -> int:
        """Token base units bought by `amount` base units of `currency`."""
        s = self.settings
        return amount * s.exchange_rate(currency) * s.token_factor // 10 ** s.currency_decimals(currency)

    def _currency_for(self, currency: Currency, tokens: int) -> int:
        """Inverse of `_tokens_for`, truncated toward zero."""
        s = self.settings
        return tokens * 10 ** s.currency_decimals(currency) // (s.exchange_rate(currency) * s.token_factor)

    def _mark_processed(self, channel: CurrencyChannel, tx_id: TxId) -> None:
        self.storage.put(StorageKeys.last_tx(channel), tx_id)

    def _refund(
        self,
        channel: CurrencyChannel,
        tx_id: TxId,
        payer: Address,
        amounts: dict[Currency, int],
        eth_address: Optional[str],
    ) -> None:
        if channel == CurrencyChannel.BRIDGED:
            assert eth_address is not None
            self.emit(RefundEthEvent(eth_address=eth_address, amount=amounts.get(Currency.ETH, 0)))
        else:
            self.emit(RefundEvent(
                to=payer,
                neo=amounts.get(Currency.NEO, 0),
                gas=amounts.get(Currency.GAS, 0),
            ))
        self._mark_processed(channel, tx_id)

    def _mint(
        self,
        ctx: Context,
        channel: CurrencyChannel,
        tx_id: TxId,
        payer: Address,
        recipient: Address,
        received: dict[Currency, int],
        eth_address: Optional[str] = None,
    ) -> bool:
        """Process one contribution.

        Returns True when tokens were minted and False when the whole
        contribution was refunded. Silent rejections raise. The recipient's
        lock snapshot is only logged here; `get_participant_info` reports it.
        """
        self._require_initialized()
        self._validate_address(payer, "payer")
        self._validate_address(recipient, "recipient")
        bridged = channel == CurrencyChannel.BRIDGED

        if tx_id == self.last_processed(channel):
            logger.info("%s: %s", CrowdsaleErrors.DUPLICATE_TX, tx_id.hex())
            raise DuplicateTransaction(CrowdsaleErrors.DUPLICATE_TX)

        now = ctx.timestamp
        if now >= self.settings.PUBLIC_SALE_END_TIME:
            if bridged:
                logger.info("%s, refunding %s", CrowdsaleErrors.SALE_CLOSED, eth_address)
                self._refund(channel, tx_id, payer, received, eth_address)
                return False
            raise SaleClosed(CrowdsaleErrors.SALE_CLOSED)

        if bridged and received.get(Currency.ETH, 0) < self.settings.ETH_MINIMUM_CONTRIBUTION:
            logger.info("%s, refunding %s", CrowdsaleErrors.BELOW_MINIMUM, eth_address)
            self._refund(channel, tx_id, payer, received, eth_address)
            return False

        accepted: dict[Currency, int] = {}
        refunds: dict[Currency, int] = {}
        for currency, amount in received.items():
            if amount <= 0:
                continue
            if self.settings.currency_allowed(currency):
                accepted[currency] = amount
            else:
                refunds[currency] = amount

        requested = sum(self._tokens_for(currency, amount) for currency, amount in accepted.items())
        if requested == 0:
            if refunds:
                self._refund(channel, tx_id, payer, received, eth_address)
                return False
            raise NotEligible(CrowdsaleErrors.NOTHING_RECEIVED)

        available = self.crowdsale_available_amount()
        verdict = self.gate.check_admissible(
            tier=self.whitelist.tier_of(payer),
            timestamp=now,
            remaining_supply=available,
            prior_total=self.sale_contribution_of(payer),
            contribution=requested,
        )
        if verdict != Admission.ADMITTED:
            reason = _ADMISSION_ERRORS[verdict]
            if verdict == Admission.CAP_EXCEEDED or bridged:
                logger.info("%s: %s, refunding", reason, payer.hex())
                self._refund(channel, tx_id, payer, received, eth_address)
                return False
            logger.info("%s: %s", reason, payer.hex())
            raise NotEligible(reason)

        # Clip to the remaining supply, spending currencies in a fixed order.
        budget = available
        minted = 0
        for currency in (*NATIVE_CURRENCIES, Currency.ETH):
            if currency not in accepted:
                continue
            tokens = self._tokens_for(currency, accepted[currency])
            taken = min(tokens, budget)
            budget -= taken
            minted += taken
            if tokens > taken:
                refunds[currency] = refunds.get(currency, 0) + self._currency_for(currency, tokens - taken)

        if any(refunds.values()):
            logger.info("purchase exceeds the available supply, refunding remainder to %s", payer.hex())
            self._refund(channel, tx_id, payer, refunds, eth_address)

        locked = self.vesting.currently_locked(recipient, now)
        new_balance = self.token.credit(recipient, minted)
        self.token.increase_total_supply(minted)
        self.storage.put(StorageKeys.sale_contribution(payer), Amount(self.sale_contribution_of(payer) + minted))
        self._mark_processed(channel, tx_id)

        self.emit(TransferEvent(from_=None, to=recipient, amount=Amount(minted)))
        logger.info(
            "minted %d tokens to %s via %s (balance %d, locked %d)",
            minted, recipient.hex(), channel.value, new_balance, locked,
        )
        return True

    @public
    def mint_tokens(self, ctx: Context) -> bool:
        """Process the NEO/GAS attached to the current transaction."""
        if ctx.address is None:
            raise NotEligible("transaction has no sender")
        received = {currency: ctx.get_received(currency) for currency in NATIVE_CURRENCIES}
        return self._mint(ctx, CurrencyChannel.NATIVE, ctx.tx_id, ctx.address, ctx.address, received)

    @public
    def mint_tokens_eth(self, ctx: Context, eth_address: str, neo_address: Address, eth_received: int) -> bool:
        """Process an ETH contribution relayed by the contribution listener."""
        if not ctx.check_witness(self.settings.ETH_CONTRIBUTION_LISTENER_KEY):
            raise Unauthorized("Only the ETH contribution listener can relay contributions")
        return self._mint(
            ctx,
            CurrencyChannel.BRIDGED,
            ctx.tx_id,
            neo_address,
            neo_address,
            {Currency.ETH: eth_received},
            eth_address=eth_address,
        )

    @view
    def last_processed(self, channel: CurrencyChannel) -> Optional[TxId]:
        return self.storage.get(StorageKeys.last_tx(channel))

    @view
    def balance_of(self, address: Address) -> Amount:
        if not is_valid_address(address):
            return Amount(0)
        return self.token.balance_of(address)

    @view
    def total_supply(self) -> Amount:
        return self.token.total_supply()

    @view
    def crowdsale_available_amount(self) -> Amount:
        """Supply headroom left for contributions."""
        return Amount(max(self.settings.max_mintable_supply - self.token.total_supply(), 0))

    @view
    def sale_contribution_of(self, address: Address) -> Amount:
        return Amount(self.storage.get(StorageKeys.sale_contribution(address), 0))

    @view
    def spendable_balance_of(self, address: Address, timestamp: int) -> Amount:
        return self.vesting.spendable_balance_of(address, timestamp)

    @view
    def get_sale_info(self, timestamp: int) -> SaleInfo:
        s = self.settings
        return SaleInfo(
            token_name=s.TOKEN_NAME,
            token_symbol=s.TOKEN_SYMBOL,
            decimals=s.TOKEN_DECIMALS,
            phase=self.gate.phase_at(timestamp),
            total_supply=self.token.total_supply(),
            max_supply=s.max_mintable_supply,
            available=self.crowdsale_available_amount(),
        )

    @view
    def get_participant_info(self, address: Address, timestamp: int) -> ParticipantInfo:
        tier = self.whitelist.tier_of(address)
        balance = self.balance_of(address)
        locked = self.vesting.currently_locked(address, timestamp)
        return ParticipantInfo(
            tier=tier,
            balance=balance,
            locked=locked,
            spendable=max(balance - locked, 0),
            contributed=self.sale_contribution_of(address),
            max_contribution=self.gate.max_contribution(tier, timestamp) * self.settings.token_factor,
        )
