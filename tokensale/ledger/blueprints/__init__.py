from tokensale.ledger.blueprints.administration import Administration
from tokensale.ledger.blueprints.crowdsale import CrowdsaleLedger
from tokensale.ledger.blueprints.participation import ParticipationGate
from tokensale.ledger.blueprints.vesting import VestingScheduler
from tokensale.ledger.blueprints.whitelist import WhitelistRegistry

BLUEPRINTS = {
    "administration": Administration,
    "crowdsale": CrowdsaleLedger,
    "participation": ParticipationGate,
    "vesting": VestingScheduler,
    "whitelist": WhitelistRegistry,
}

__all__ = [
    "BLUEPRINTS",
    "Administration",
    "CrowdsaleLedger",
    "ParticipationGate",
    "VestingScheduler",
    "WhitelistRegistry",
]
