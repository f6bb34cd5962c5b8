from tokensale.conf.settings import SaleSettings

SETTINGS = SaleSettings(
    NETWORK_NAME="nos-mainnet",
    TOKEN_NAME="nOS",
    TOKEN_SYMBOL="NOS",
    TOKEN_DECIMALS=8,
    TOKEN_MAX_SUPPLY=375_000_000,
    # Privileged identities (reversed script hashes)
    INITIAL_ADMIN_ACCOUNT=bytes([
        172, 93, 207, 177, 41, 141, 8, 175, 19, 221, 90, 238, 233, 67, 54, 204, 47, 232, 62, 57,
    ]),
    ETH_CONTRIBUTION_LISTENER_KEY=bytes([
        216, 6, 188, 207, 10, 57, 209, 140, 176, 193, 128, 149, 72, 222, 4, 133, 135, 248, 79, 46,
    ]),
    KYC_MIDDLEWARE_KEY=bytes([
        149, 67, 119, 140, 241, 7, 126, 51, 16, 168, 205, 237, 225, 161, 64, 117, 68, 101, 182, 197,
    ]),
    PROJECT_KEY=bytes([
        163, 78, 249, 186, 149, 73, 242, 165, 255, 174, 25, 102, 234, 143, 189, 222, 71, 131, 159, 32,
    ]),
    ADDITIONAL_COMPANY_TOKEN_FUND=bytes([
        249, 85, 33, 169, 71, 161, 147, 205, 102, 214, 123, 138, 241, 93, 53, 1, 184, 112, 172, 1,
    ]),
    MAXIMUM_CONTRIBUTION_AMOUNT=92_064,
    PRESALE_TIER_CAPS={
        1: 92_064,
        2: 46_704,
        3: 27_552,
        4: 16_968,
    },
    ALLOW_NEO=True,
    NEO_TO_TOKEN_RATE=168,
    ALLOW_GAS=False,
    GAS_TO_TOKEN_RATE=65,
    ALLOW_ETH=True,
    ETH_TO_TOKEN_RATE=2066,
    ETH_MINIMUM_CONTRIBUTION=100_000_000_000_000_000,  # 0.1 ETH
    # 25% after 1 year, then every 4 months
    VESTING_INCENTIVE_INITIAL_DELAY=31_536_000,
    VESTING_INCENTIVE_PERIOD=10_512_000,
    # 25% immediately, then every 3 months
    VESTING_PRIVATE_SALE_PERIOD=7_889_400,
    # 25% after 3 months, then every 3 months
    VESTING_COMPANY_PERIOD=7_889_400,
    DISTRIBUTION_PERCENTAGE=25,
    PRESALE_START_TIME=1_540_836_000,
    PRESALE_END_TIME=1_541_091_600,
    PUBLIC_SALE_START_TIME=1_541_095_200,
    PUBLIC_SALE_END_TIME=1_541_700_000,
    # angel 22.5m + private presale 67.5m + incentive 100m + company 25m + ecosystem 50m
    LOCKED_TOKEN_ALLOCATION_AMOUNT=265_000_000,
    IMMEDIATE_COMPANY_RESERVE=10_000_000,
    WHITELIST_TRANSFER_FROM_LISTINGS=True,
)
