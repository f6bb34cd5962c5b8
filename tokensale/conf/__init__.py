from tokensale.conf.get_settings import get_global_settings
from tokensale.conf.settings import SaleSettings

__all__ = [
    "SaleSettings",
    "get_global_settings",
]
