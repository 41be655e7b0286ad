# lspbridge/config/__init__.py

from .schema import BridgeConfig, MessagesConfig
from .loader import load_config, save_config, get_config, reset_config_cache

__all__ = ["BridgeConfig", "MessagesConfig", "load_config", "save_config", "get_config", "reset_config_cache"]
