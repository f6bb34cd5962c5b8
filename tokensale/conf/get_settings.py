import importlib
import logging
import os
from functools import lru_cache
from typing import Optional

import yaml

from tokensale.conf.settings import SaleSettings

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "TOKENSALE_CONFIG_FILE"
CONFIG_MODULE_ENV = "TOKENSALE_CONFIG"
DEFAULT_CONFIG_MODULE = "tokensale.conf.nos_mainnet"


def load_settings_from_yaml(filepath: str) -> SaleSettings:
    with open(filepath) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{filepath}: expected a mapping at the top level")
    return SaleSettings.model_validate(data)


def load_settings_from_module(module_name: str) -> SaleSettings:
    module = importlib.import_module(module_name)
    settings = getattr(module, "SETTINGS", None)
    if not isinstance(settings, SaleSettings):
        raise ValueError(f"{module_name} does not define SETTINGS")
    return settings


@lru_cache(maxsize=None)
def _get_settings(config_file: Optional[str], config_module: Optional[str]) -> SaleSettings:
    if config_file:
        logger.info("loading sale settings from %s", config_file)
        return load_settings_from_yaml(config_file)
    module_name = config_module or DEFAULT_CONFIG_MODULE
    logger.info("loading sale settings from module %s", module_name)
    return load_settings_from_module(module_name)


def get_global_settings() -> SaleSettings:
    """Return the settings selected by the environment.

    `TOKENSALE_CONFIG_FILE` (a YAML file) takes precedence over
    `TOKENSALE_CONFIG` (a python module exposing `SETTINGS`).
    """
    return _get_settings(os.environ.get(CONFIG_FILE_ENV), os.environ.get(CONFIG_MODULE_ENV))
