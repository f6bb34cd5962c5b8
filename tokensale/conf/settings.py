from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tokensale.crypto.util import parse_address
from tokensale.ledger.exception import InvalidAddress
from tokensale.ledger.types import Address, AllocationClass, Currency

TIERS = (1, 2, 3, 4)


class SaleSettings(BaseModel):
    """Every constant of a crowdsale deployment.

    Token amounts (`token_max_supply`, caps, reserves) are in whole tokens and
    scaled by `token_factor` where the ledger stores them. Exchange rates are
    whole tokens per whole unit of the paying currency.
    """

    model_config = ConfigDict(frozen=True)

    NETWORK_NAME: str = "unnamed"

    # Token metadata
    TOKEN_NAME: str
    TOKEN_SYMBOL: str
    TOKEN_DECIMALS: int = Field(default=8, ge=0, le=18)
    TOKEN_MAX_SUPPLY: int = Field(gt=0)

    # Privileged identities
    INITIAL_ADMIN_ACCOUNT: Address
    ETH_CONTRIBUTION_LISTENER_KEY: Address
    KYC_MIDDLEWARE_KEY: Address
    PROJECT_KEY: Address
    ADDITIONAL_COMPANY_TOKEN_FUND: Address

    # Contribution caps, in whole tokens
    MAXIMUM_CONTRIBUTION_AMOUNT: int = Field(gt=0)
    PRESALE_TIER_CAPS: dict[int, int]

    # Accepted currencies
    ALLOW_NEO: bool = True
    NEO_TO_TOKEN_RATE: int = Field(gt=0)
    NEO_DECIMALS: int = 8
    ALLOW_GAS: bool = False
    GAS_TO_TOKEN_RATE: int = Field(gt=0)
    GAS_DECIMALS: int = 8
    ALLOW_ETH: bool = True
    ETH_TO_TOKEN_RATE: int = Field(gt=0)
    ETH_DECIMALS: int = 18
    ETH_MINIMUM_CONTRIBUTION: int = Field(default=0, ge=0)  # in wei

    # Vesting (seconds)
    VESTING_INCENTIVE_INITIAL_DELAY: int = Field(ge=0)
    VESTING_INCENTIVE_PERIOD: int = Field(gt=0)
    VESTING_PRIVATE_SALE_PERIOD: int = Field(gt=0)
    VESTING_COMPANY_PERIOD: int = Field(gt=0)
    DISTRIBUTION_PERCENTAGE: int = Field(default=25, gt=0, le=100)

    # Sale windows (unix timestamps, inclusive)
    PRESALE_START_TIME: int
    PRESALE_END_TIME: int
    PUBLIC_SALE_START_TIME: int
    PUBLIC_SALE_END_TIME: int

    # Reserves, in whole tokens
    LOCKED_TOKEN_ALLOCATION_AMOUNT: int = Field(ge=0)
    IMMEDIATE_COMPANY_RESERVE: int = Field(ge=0)

    WHITELIST_TRANSFER_FROM_LISTINGS: bool = True

    @field_validator(
        "INITIAL_ADMIN_ACCOUNT",
        "ETH_CONTRIBUTION_LISTENER_KEY",
        "KYC_MIDDLEWARE_KEY",
        "PROJECT_KEY",
        "ADDITIONAL_COMPANY_TOKEN_FUND",
        mode="before",
    )
    @classmethod
    def _parse_identity(cls, value: Any) -> Address:
        if isinstance(value, (list, tuple)):
            value = bytes(value)
        try:
            return parse_address(value)
        except InvalidAddress as e:
            raise ValueError(str(e)) from e

    @field_validator("PRESALE_TIER_CAPS")
    @classmethod
    def _check_tier_caps(cls, value: dict[int, int]) -> dict[int, int]:
        if sorted(value) != list(TIERS):
            raise ValueError(f"presale caps must be defined for tiers {TIERS}")
        if any(cap <= 0 for cap in value.values()):
            raise ValueError("presale caps must be positive")
        return value

    @model_validator(mode="after")
    def _check_supply_and_windows(self) -> "SaleSettings":
        if not (self.PRESALE_START_TIME <= self.PRESALE_END_TIME
                < self.PUBLIC_SALE_START_TIME <= self.PUBLIC_SALE_END_TIME):
            raise ValueError("sale windows must be ordered: presale, then public sale")
        if self.LOCKED_TOKEN_ALLOCATION_AMOUNT + self.IMMEDIATE_COMPANY_RESERVE > self.TOKEN_MAX_SUPPLY:
            raise ValueError("reserves exceed the maximum supply")
        return self

    @property
    def token_factor(self) -> int:
        return 10 ** self.TOKEN_DECIMALS

    @property
    def max_mintable_supply(self) -> int:
        return self.TOKEN_MAX_SUPPLY * self.token_factor

    def exchange_rate(self, currency: Currency) -> int:
        return {
            Currency.NEO: self.NEO_TO_TOKEN_RATE,
            Currency.GAS: self.GAS_TO_TOKEN_RATE,
            Currency.ETH: self.ETH_TO_TOKEN_RATE,
        }[currency]

    def currency_decimals(self, currency: Currency) -> int:
        return {
            Currency.NEO: self.NEO_DECIMALS,
            Currency.GAS: self.GAS_DECIMALS,
            Currency.ETH: self.ETH_DECIMALS,
        }[currency]

    def currency_allowed(self, currency: Currency) -> bool:
        return {
            Currency.NEO: self.ALLOW_NEO,
            Currency.GAS: self.ALLOW_GAS,
            Currency.ETH: self.ALLOW_ETH,
        }[currency]

    def vesting_timing(self, allocation_class: AllocationClass) -> tuple[int, int]:
        """Return (initial delay, release period) in seconds for a class."""
        if allocation_class == AllocationClass.INCENTIVE:
            return self.VESTING_INCENTIVE_INITIAL_DELAY, self.VESTING_INCENTIVE_PERIOD
        if allocation_class == AllocationClass.PRIVATE_SALE:
            return 0, self.VESTING_PRIVATE_SALE_PERIOD
        return self.VESTING_COMPANY_PERIOD, self.VESTING_COMPANY_PERIOD
