from tokensale.ledger.commands import (
    AddAddress,
    ClaimUnsoldTokens,
    GetGroupMaxContribution,
    GetGroupNumber,
    InitSmartContract,
    MintTokens,
    parse_command,
)
from tokensale.ledger.events import RefundEvent, TransferEvent
from tokensale.ledger.exception import InvalidCommand, NotEligible
from tokensale.ledger.types import Currency
from tests.ledger.blueprints.unittest import NEO, SaleTestCase


class RunnerTestCase(SaleTestCase):

    def test_failed_call_leaves_no_trace(self):
        self._initialize()
        snapshot = dict(self.storage.data)
        events = list(self.runner.events)

        payer = self.gen_random_address()
        with self.assertRaises(NotEligible):
            self._contribute_neo(payer, 1 * NEO, self.presale_time)

        self.assertEqual(self.storage.data, snapshot)
        self.assertEqual(self.runner.events, events)

    def test_refund_is_committed(self):
        self._initialize()
        payer = self._whitelist(tier=1)
        self.runner.events.clear()

        self.assertFalse(self._contribute_neo(payer, 1_000 * NEO, self.presale_time))
        self.assertEqual(self.runner.events, [RefundEvent(to=payer, neo=1_000 * NEO, gas=0)])

    def test_only_marked_methods_are_callable(self):
        ctx = self.admin_context()
        with self.assertRaises(InvalidCommand):
            self.runner.call_public_method("crowdsale", "_mint", ctx)
        with self.assertRaises(InvalidCommand):
            self.runner.call_public_method("crowdsale", "balance_of", ctx, self.admin)
        with self.assertRaises(InvalidCommand):
            self.runner.call_view_method("administration", "initialize", ctx)
        with self.assertRaises(InvalidCommand):
            self.runner.call_public_method("treasury", "initialize", ctx)
        self.assertFalse(self.runner.is_initialized())

    def test_execute_soft_failures(self):
        payer = self.gen_random_address()
        ctx = self.create_context(timestamp=self.presale_time, caller=payer, received={Currency.NEO: NEO})

        # Not accepted before initialization
        self.assertFalse(self.runner.execute(ctx, MintTokens()))
        self.assertFalse(self.runner.execute(self.admin_context(self.closed_time), ClaimUnsoldTokens()))

        # Privilege failures
        self.assertFalse(self.runner.execute(ctx, InitSmartContract()))
        self.assertFalse(self.runner.execute(ctx, AddAddress(address=payer, group_number=1)))
        self.assertEqual(self.storage.data, {})

    def test_execute_sale_flow(self):
        payer = self.gen_random_address()
        self.assertTrue(self.runner.execute(self.kyc_context(), AddAddress(address=payer, group_number=1)))
        self.assertEqual(self.runner.execute(self.kyc_context(), GetGroupNumber(address=payer)), 1)
        self.assertTrue(self.runner.execute(self.admin_context(), InitSmartContract()))

        query_ctx = self.create_context(timestamp=self.presale_time)
        self.assertEqual(self.runner.execute(query_ctx, GetGroupMaxContribution(group_number=1)), 92_064)

        ctx = self.create_context(timestamp=self.presale_time, caller=payer, received={Currency.NEO: 2 * NEO})
        self.assertTrue(self.runner.execute(ctx, MintTokens()))
        self.assertEqual(self.runner.events[-1], TransferEvent(from_=None, to=payer, amount=336 * self.factor))

        # Same transaction delivered twice
        self.assertFalse(self.runner.execute(ctx, MintTokens()))
        self.assertEqual(self.balance_of(payer), 336 * self.factor)

    def test_execute_raw(self):
        payer = self.gen_random_address()
        data = {"operation": "AddAddress", "address": payer.hex(), "group_number": 3}
        self.assertTrue(self.runner.execute_raw(self.kyc_context(), data))
        self.assertEqual(self.runner.execute_raw(self.kyc_context(), {"operation": "GetGroupNumber",
                                                                      "address": payer.hex()}), 3)

        self.assertFalse(self.runner.execute_raw(self.kyc_context(), {"operation": "AddAddress"}))
        self.assertFalse(self.runner.execute_raw(self.kyc_context(), {"operation": "Unknown"}))

    def test_queries_before_initialization(self):
        ctx = self.create_context()
        self.assertEqual(self.runner.execute(ctx, parse_command({"operation": "totalSupply"})), False)
        self.assertFalse(self.runner.execute(ctx, parse_command({"operation": "crowdsale_status",
                                                                 "address": self.admin})))
