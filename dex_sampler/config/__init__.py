"""
Configuration management for dex_sampler.

Example:
    from dex_sampler.config import ConfigManager

    config = ConfigManager()

    # Access chain settings
    ethereum_rpc = config.chains.get_rpc_url("ethereum")

    # Resolve the sampler contract for a network
    sampler = config.contracts.resolve_batch_entrypoint("ethereum")
"""

from .base import BaseConfig, ConfigurationError
from .chains import ChainConfig
from .contracts import ContractConfig
from .manager import ConfigManager

__all__ = [
    "BaseConfig",
    "ConfigurationError",
    "ChainConfig",
    "ContractConfig",
    "ConfigManager",
]
