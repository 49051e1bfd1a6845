"""
Contract address configuration for dex_sampler.

The sampler contract exposing ``batchCall`` is deployed per network. Its
address is read from ``SAMPLER_ADDRESS_<NETWORK>`` environment variables
unless an explicit mapping is passed in.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from web3 import Web3
from eth_typing import ChecksumAddress

from .base import BaseConfig, ConfigurationError

logger = logging.getLogger(__name__)

SAMPLER_NETWORKS = ["ethereum", "base", "arbitrum"]


def _sampler_addresses_from_env() -> Dict[str, str]:
    addresses = {}
    for network in SAMPLER_NETWORKS:
        address = BaseConfig.get_env(f"SAMPLER_ADDRESS_{network.upper()}")
        if address:
            addresses[network] = address
    return addresses


@dataclass
class ContractConfig(BaseConfig):
    """Sampler contract addresses by network."""

    sampler_addresses: Dict[str, str] = field(default_factory=_sampler_addresses_from_env)

    def _validate_config(self):
        super()._validate_config()
        for network, address in self.sampler_addresses.items():
            if not Web3.is_address(address):
                raise ConfigurationError(
                    f"Invalid sampler address for {network}: {address}"
                )

    @property
    def configured_networks(self) -> List[str]:
        """Networks with a known sampler address."""
        return sorted(self.sampler_addresses)

    def resolve_batch_entrypoint(self, network: str) -> ChecksumAddress:
        """
        Get the sampler contract address for a network.

        Args:
            network: Network name (ethereum, base, arbitrum)

        Returns:
            Checksummed sampler address

        Raises:
            ConfigurationError: If no address is configured for the network
        """
        address = self.sampler_addresses.get(network.lower())
        if not address:
            raise ConfigurationError(
                f"No address for sampler contract on network: {network}"
            )
        return Web3.to_checksum_address(address)
