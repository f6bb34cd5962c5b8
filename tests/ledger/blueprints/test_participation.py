from tokensale.ledger.blueprints.participation import Admission, ParticipationGate
from tokensale.ledger.storage import ChangesTracker
from tokensale.ledger.types import SalePhase
from tests.ledger.blueprints.unittest import SaleTestCase


class ParticipationTestCase(SaleTestCase):

    def view(self, method: str, *args):
        return self.runner.call_view_method("participation", method, *args)

    def test_phase_at(self):
        s = self.settings
        self.assertEqual(self.view("phase_at", s.PRESALE_START_TIME - 1), SalePhase.NOT_STARTED)
        self.assertEqual(self.view("phase_at", s.PRESALE_START_TIME), SalePhase.PRESALE)
        self.assertEqual(self.view("phase_at", s.PRESALE_END_TIME), SalePhase.PRESALE)
        self.assertEqual(self.view("phase_at", self.gap_time), SalePhase.GAP)
        self.assertEqual(self.view("phase_at", s.PUBLIC_SALE_START_TIME), SalePhase.PUBLIC_SALE)
        self.assertEqual(self.view("phase_at", s.PUBLIC_SALE_END_TIME - 1), SalePhase.PUBLIC_SALE)
        self.assertEqual(self.view("phase_at", s.PUBLIC_SALE_END_TIME), SalePhase.CLOSED)

    def test_tier_unlock_time(self):
        for tier in (1, 2, 3, 4):
            self.assertEqual(self.view("tier_unlock_time", tier), self.settings.PRESALE_START_TIME)
        self.assertEqual(self.view("tier_unlock_time", 0), 0)
        self.assertEqual(self.view("tier_unlock_time", 5), 0)

    def test_is_unlocked(self):
        start = self.settings.PRESALE_START_TIME
        self.assertFalse(self.view("is_unlocked", 1, start - 1))
        self.assertTrue(self.view("is_unlocked", 1, start))
        self.assertTrue(self.view("is_unlocked", 4, self.public_time))
        self.assertFalse(self.view("is_unlocked", 0, self.public_time))
        self.assertFalse(self.view("is_unlocked", 7, self.public_time))

    def test_max_contribution_presale(self):
        expected = {1: 92_064, 2: 46_704, 3: 27_552, 4: 16_968}
        for tier, cap in expected.items():
            self.assertEqual(self.view("max_contribution", tier, self.presale_time), cap)
        self.assertEqual(self.view("max_contribution", 5, self.presale_time), 0)

    def test_max_contribution_public_sale(self):
        for tier in (1, 2, 3, 4):
            self.assertEqual(self.view("max_contribution", tier, self.public_time), 92_064)
        self.assertEqual(self.view("max_contribution", 0, self.public_time), 0)

    def test_max_contribution_outside_windows(self):
        self.assertEqual(self.view("max_contribution", 1, self.init_time), 0)
        self.assertEqual(self.view("max_contribution", 1, self.gap_time), 0)
        self.assertEqual(self.view("max_contribution", 1, self.settings.PUBLIC_SALE_END_TIME + 1), 0)

    def test_check_admissible(self):
        gate = ParticipationGate(ChangesTracker(self.storage), self.settings)
        cap = 16_968 * self.factor
        available = 10 ** 20

        def check(tier, timestamp=self.presale_time, remaining=available, prior=0, contribution=1):
            return gate.check_admissible(
                tier=tier,
                timestamp=timestamp,
                remaining_supply=remaining,
                prior_total=prior,
                contribution=contribution,
            )

        self.assertEqual(check(0), Admission.NOT_WHITELISTED)
        self.assertEqual(check(4, timestamp=self.init_time), Admission.NOT_UNLOCKED)
        self.assertEqual(check(4, remaining=0), Admission.SUPPLY_EXHAUSTED)
        self.assertEqual(check(4, contribution=cap), Admission.ADMITTED)
        self.assertEqual(check(4, prior=cap, contribution=1), Admission.CAP_EXCEEDED)
        # Outside both windows the cap is zero
        self.assertEqual(check(4, timestamp=self.gap_time), Admission.CAP_EXCEEDED)
