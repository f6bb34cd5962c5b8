import os
import tempfile
from unittest import TestCase
from unittest.mock import patch

import yaml
from pydantic import ValidationError

import tokensale.conf
from tokensale.conf.get_settings import _get_settings, get_global_settings, load_settings_from_yaml
from tokensale.conf.nos_mainnet import SETTINGS
from tokensale.crypto.util import get_address_b58_from_script_hash
from tokensale.ledger.types import AllocationClass, Currency

TESTNET_YAML = os.path.join(os.path.dirname(tokensale.conf.__file__), "nos_testnet.yml")


class SettingsTestCase(TestCase):

    def setUp(self):
        _get_settings.cache_clear()
        self.addCleanup(_get_settings.cache_clear)

    def _data(self, **overrides):
        data = SETTINGS.model_dump()
        data.update(overrides)
        return data

    def test_mainnet(self):
        self.assertEqual(SETTINGS.token_factor, 10 ** 8)
        self.assertEqual(SETTINGS.max_mintable_supply, 375_000_000 * 10 ** 8)
        self.assertEqual(SETTINGS.exchange_rate(Currency.NEO), 168)
        self.assertEqual(SETTINGS.currency_decimals(Currency.ETH), 18)
        self.assertFalse(SETTINGS.currency_allowed(Currency.GAS))
        self.assertEqual(SETTINGS.vesting_timing(AllocationClass.INCENTIVE), (31_536_000, 10_512_000))
        self.assertEqual(SETTINGS.vesting_timing(AllocationClass.PRIVATE_SALE), (0, 7_889_400))
        self.assertEqual(SETTINGS.vesting_timing(AllocationClass.COMPANY), (7_889_400, 7_889_400))
        # The tier 1 cap is exactly 548 NEO worth of tokens
        self.assertEqual(SETTINGS.PRESALE_TIER_CAPS[1], 548 * SETTINGS.NEO_TO_TOKEN_RATE)

    def test_testnet_yaml(self):
        settings = load_settings_from_yaml(TESTNET_YAML)
        self.assertEqual(settings.NETWORK_NAME, "nos-testnet")
        self.assertEqual(settings.INITIAL_ADMIN_ACCOUNT, SETTINGS.INITIAL_ADMIN_ACCOUNT)
        self.assertEqual(settings.KYC_MIDDLEWARE_KEY, SETTINGS.KYC_MIDDLEWARE_KEY)
        self.assertNotEqual(settings.ETH_CONTRIBUTION_LISTENER_KEY, SETTINGS.ETH_CONTRIBUTION_LISTENER_KEY)
        self.assertEqual(settings.PRESALE_TIER_CAPS, SETTINGS.PRESALE_TIER_CAPS)
        self.assertEqual(settings.VESTING_INCENTIVE_PERIOD, 300)

    def test_identity_formats(self):
        admin = bytes(range(20))
        for value in (admin, admin.hex(), list(admin), get_address_b58_from_script_hash(admin)):
            settings = SETTINGS.model_validate(self._data(INITIAL_ADMIN_ACCOUNT=value))
            self.assertEqual(settings.INITIAL_ADMIN_ACCOUNT, admin)

    def test_invalid_identity(self):
        with self.assertRaises(ValidationError):
            SETTINGS.model_validate(self._data(PROJECT_KEY=b"\x00" * 19))

    def test_invalid_tier_caps(self):
        with self.assertRaises(ValidationError):
            SETTINGS.model_validate(self._data(PRESALE_TIER_CAPS={1: 10, 2: 10, 3: 10}))
        with self.assertRaises(ValidationError):
            SETTINGS.model_validate(self._data(PRESALE_TIER_CAPS={1: 10, 2: 10, 3: 10, 4: 0}))

    def test_invalid_windows(self):
        with self.assertRaises(ValidationError):
            SETTINGS.model_validate(self._data(PUBLIC_SALE_START_TIME=SETTINGS.PRESALE_END_TIME))
        with self.assertRaises(ValidationError):
            SETTINGS.model_validate(self._data(PUBLIC_SALE_END_TIME=SETTINGS.PUBLIC_SALE_START_TIME - 1))

    def test_reserves_exceed_supply(self):
        with self.assertRaises(ValidationError):
            SETTINGS.model_validate(self._data(TOKEN_MAX_SUPPLY=200_000_000))

    def test_settings_are_frozen(self):
        with self.assertRaises(ValidationError):
            SETTINGS.TOKEN_MAX_SUPPLY = 1

    def test_global_settings_default(self):
        with patch.dict(os.environ, clear=True):
            self.assertIs(get_global_settings(), SETTINGS)

    def test_global_settings_from_yaml(self):
        data = self._data(NETWORK_NAME="local", TOKEN_SYMBOL="TST")
        data = {key: (value.hex() if isinstance(value, bytes) else value) for key, value in data.items()}
        with tempfile.NamedTemporaryFile("w", suffix=".yml", delete=False) as f:
            yaml.safe_dump(data, f)
        self.addCleanup(os.unlink, f.name)

        with patch.dict(os.environ, {"TOKENSALE_CONFIG_FILE": f.name}):
            settings = get_global_settings()
        self.assertEqual(settings.NETWORK_NAME, "local")
        self.assertEqual(settings.TOKEN_SYMBOL, "TST")
        self.assertEqual(settings.PROJECT_KEY, SETTINGS.PROJECT_KEY)

    def test_global_settings_from_module(self):
        with patch.dict(os.environ, {"TOKENSALE_CONFIG": "tokensale.conf.nos_mainnet"}, clear=True):
            self.assertIs(get_global_settings(), SETTINGS)
        with patch.dict(os.environ, {"TOKENSALE_CONFIG": "tokensale.conf.settings"}, clear=True):
            with self.assertRaises(ValueError):
                get_global_settings()
