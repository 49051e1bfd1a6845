"""
Configuration manager for dex_sampler.

This module combines the configuration classes into a single object that
is passed explicitly to whatever needs it. There is no process-wide
instance; each caller owns its manager.
"""

import logging
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigurationError
from .chains import ChainConfig
from .contracts import ContractConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager that combines all configuration classes.

    This class provides easy access to all configuration settings and ensures
    that configurations are properly initialized and validated.
    """

    def __init__(
        self,
        environment: Optional[str] = None,
        sampler_addresses: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, staging, production)
            sampler_addresses: Explicit network -> sampler address mapping;
                read from the environment when omitted
        """
        self._environment = environment
        self._sampler_addresses = sampler_addresses
        self._base_config = None
        self._chain_config = None
        self._contract_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
                self._base_config._validate_config()

            self._chain_config = ChainConfig()
            if self._sampler_addresses is not None:
                self._contract_config = ContractConfig(
                    sampler_addresses=dict(self._sampler_addresses)
                )
            else:
                self._contract_config = ContractConfig()

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigurationError(f"Configuration initialization failed: {e}") from e

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def chains(self) -> ChainConfig:
        """Get chain configuration."""
        return self._chain_config

    @property
    def contracts(self) -> ContractConfig:
        """Get contract address configuration."""
        return self._contract_config

    def get_sampler_chain_config(self, chain_name: str) -> Dict[str, Any]:
        """
        Get combined chain and sampler configuration for a specific chain.

        Args:
            chain_name: Name of the blockchain (ethereum, base, arbitrum)

        Returns:
            Combined configuration dictionary

        Raises:
            ConfigurationError: If the chain or its sampler address is unknown
        """
        chain_config = self.chains.get_chain_config(chain_name)
        return {
            "chain_name": chain_name,
            "chain_id": chain_config["chain_id"],
            "rpc_url": chain_config["rpc_url"],
            "rpc_timeout": self.chains.RPC_TIMEOUT_SECONDS,
            "sampler_address": self.contracts.resolve_batch_entrypoint(chain_name),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "chains": self.chains.to_dict() if self.chains else {},
            "contracts": self.contracts.to_dict() if self.contracts else {},
        }

    def __repr__(self) -> str:
        """String representation of the configuration manager."""
        return f"ConfigManager(environment={self.environment})"
