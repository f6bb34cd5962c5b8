import os
from typing import Iterable, Mapping, Optional
from unittest import TestCase

from tokensale.conf.nos_mainnet import SETTINGS
from tokensale.conf.settings import SaleSettings
from tokensale.ledger.context import Context
from tokensale.ledger.runner import Runner
from tokensale.ledger.storage import MemoryLedgerStorage, TokenLedger
from tokensale.ledger.types import Address, Currency, Timestamp, TxId

NEO = 10 ** 8
ETH = 10 ** 18


class SaleTestCase(TestCase):
    """Base class for ledger tests: a fresh runner over an empty storage."""

    settings: SaleSettings = SETTINGS

    def setUp(self) -> None:
        super().setUp()
        self.storage = MemoryLedgerStorage()
        self.runner = Runner(self.storage, self.settings)

        self.factor = self.settings.token_factor
        self.admin = self.settings.INITIAL_ADMIN_ACCOUNT
        self.kyc = self.settings.KYC_MIDDLEWARE_KEY
        self.listener = self.settings.ETH_CONTRIBUTION_LISTENER_KEY

        self.init_time = self.settings.PRESALE_START_TIME - 86400
        self.presale_time = self.settings.PRESALE_START_TIME + 60
        self.gap_time = self.settings.PRESALE_END_TIME + 60
        self.public_time = self.settings.PUBLIC_SALE_START_TIME + 60
        self.closed_time = self.settings.PUBLIC_SALE_END_TIME

    def gen_random_address(self) -> Address:
        return Address(os.urandom(20))

    def gen_random_tx_id(self) -> TxId:
        return TxId(os.urandom(32))

    def create_context(
        self,
        timestamp: Optional[int] = None,
        caller: Optional[Address] = None,
        witnesses: Iterable[bytes] = (),
        received: Optional[Mapping[Currency, int]] = None,
        tx_id: Optional[TxId] = None,
    ) -> Context:
        """Build a context; the caller always witnesses its own transaction."""
        signers = set(witnesses)
        if caller is not None:
            signers.add(caller)
        return Context(
            timestamp=Timestamp(self.init_time if timestamp is None else timestamp),
            address=caller,
            tx_id=tx_id if tx_id is not None else self.gen_random_tx_id(),
            witnesses=frozenset(signers),
            received=dict(received or {}),
        )

    def admin_context(self, timestamp: Optional[int] = None) -> Context:
        return self.create_context(timestamp=timestamp, witnesses=[self.admin])

    def kyc_context(self, timestamp: Optional[int] = None) -> Context:
        return self.create_context(timestamp=timestamp, witnesses=[self.kyc])

    def listener_context(self, timestamp: int, tx_id: Optional[TxId] = None) -> Context:
        return self.create_context(timestamp=timestamp, witnesses=[self.listener], tx_id=tx_id)

    def _initialize(self) -> None:
        self.runner.call_public_method("administration", "initialize", self.admin_context(self.init_time))

    def _whitelist(self, tier: int = 1, address: Optional[Address] = None) -> Address:
        if address is None:
            address = self.gen_random_address()
        self.runner.call_public_method("whitelist", "add_address", self.kyc_context(), address, tier)
        return address

    def _contribute_neo(self, payer: Address, neo: int, timestamp: int, tx_id: Optional[TxId] = None) -> bool:
        ctx = self.create_context(timestamp=timestamp, caller=payer, received={Currency.NEO: neo}, tx_id=tx_id)
        return self.runner.call_public_method("crowdsale", "mint_tokens", ctx)

    def balance_of(self, address: Address) -> int:
        return self.runner.call_view_method("crowdsale", "balance_of", address)

    def total_supply(self) -> int:
        return self.runner.call_view_method("crowdsale", "total_supply")

    def assertSupplyInvariants(self) -> None:
        """Supply never exceeds the cap; balances plus the unallocated pool add up to it."""
        total = self.total_supply()
        self.assertLessEqual(total, self.settings.max_mintable_supply)
        pool = self.runner.call_view_method("administration", "get_private_sale_pool_info")
        self.assertEqual(TokenLedger(self.storage).sum_of_balances() + pool.remaining, total)
