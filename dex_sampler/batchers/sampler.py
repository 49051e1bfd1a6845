"""
Sampler batch executor.

This module executes contract operations against the on-chain sampler
contract. All operations of a batch are packed into a single ``batchCall``
and sent with one eth.call() at an optional pinned block.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

from hexbytes import HexBytes
from web3 import Web3

from ..config import ConfigManager, ContractConfig
from .abi import ContractInterface
from .errors import ErrorHandler, RemoteExecutionError
from .operations import ContractOperation, splice_call_results
from .sampler_operation import SamplerOperation
from .types import NULL_BYTES, SamplerOverrides

logger = logging.getLogger(__name__)


class Sampler(SamplerOperation):
    """
    Executes sampler operations with a single eth.call() per batch.

    Operations whose call data is NULL_BYTES are resolved locally and never
    sent. Reverts of individual operations are reported per slot by the
    sampler contract and decoded through each operation's ``handle_revert``;
    only a failure of the eth.call() itself raises.
    """

    def __init__(
        self,
        web3: Web3,
        chain: str = "ethereum",
        overrides: Optional[SamplerOverrides] = None,
        contract_config: Optional[ContractConfig] = None,
        contract_interface: Optional[ContractInterface] = None,
    ):
        """
        Initialize the sampler.

        Args:
            web3: Web3 instance used for eth.call()
            chain: Network name used to resolve the sampler address
            overrides: Default execution context for batches
            contract_config: Sampler addresses by network
            contract_interface: Sampler ABI (defaults to the bundled one)

        Raises:
            ConfigurationError: If no sampler address is configured for chain
        """
        super().__init__(chain, contract_interface)
        self.web3 = web3
        self.overrides = overrides or SamplerOverrides()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

        contract_config = contract_config or ContractConfig()
        self.sampler_address = contract_config.resolve_batch_entrypoint(chain)

    async def execute(self, *ops: ContractOperation) -> List[Any]:
        """Execute operations given as positional arguments."""
        return await self.execute_batch(list(ops))

    async def execute_batch(
        self,
        ops: Sequence[ContractOperation],
        overrides: Optional[SamplerOverrides] = None,
    ) -> List[Any]:
        """
        Execute operations in one batch call.

        Args:
            ops: Operations to execute
            overrides: Execution context for this call, defaults to the
                sampler's own

        Returns:
            One result per operation, in the order of ``ops``

        Raises:
            RemoteExecutionError: If the eth.call() fails
            DecodeError: If the response doesn't decode
        """
        call_datas = [op.encode_call() for op in ops]

        if all(call_data == NULL_BYTES for call_data in call_datas):
            self.logger.debug(f"Resolving {len(ops)} operations without a remote call")
            return [op.handle_call_results(NULL_BYTES) for op in ops]

        overrides = overrides or self.overrides
        sub_calls = [call_data for call_data in call_datas if call_data != NULL_BYTES]
        raw_call_results = self._make_batch_call(sub_calls, overrides.block_identifier)

        return splice_call_results(ops, call_datas, raw_call_results)

    def _prepare_call_data(self, sub_calls: Sequence[bytes]) -> HexBytes:
        """Encode the ``batchCall`` wrapping all sub calls."""
        return self.contract_interface.encode_function_data(
            "batchCall", [[bytes(call_data) for call_data in sub_calls]]
        )

    def _make_batch_call(
        self,
        sub_calls: Sequence[bytes],
        block_identifier: Any = "latest",
    ) -> Tuple[Tuple[bytes, bool], ...]:
        """
        Send sub calls to the sampler's ``batchCall`` using eth.call().

        Args:
            sub_calls: Encoded sub calls, none of them NULL_BYTES
            block_identifier: Block to call at

        Returns:
            One ``(data, success)`` pair per sub call
        """
        call_data = self._prepare_call_data(sub_calls)

        try:
            raw_response = self.web3.eth.call(
                {"to": self.sampler_address, "data": Web3.to_hex(call_data)},
                block_identifier=block_identifier,
            )
        except Exception as e:
            category = self.error_handler.log_error(
                e,
                {
                    "operation": "batchCall",
                    "chain": self.chain,
                    "sub_calls": len(sub_calls),
                    "block_identifier": str(block_identifier),
                },
            )
            raise RemoteExecutionError(f"Batch call failed: {e}", category) from e

        (call_results,) = self.contract_interface.decode_function_result(
            "batchCall", raw_response
        )
        self.logger.debug(
            f"batchCall returned {len(call_results)} results at block {block_identifier}"
        )
        return call_results


def build_sampler(
    chain: Optional[str] = None,
    config_manager: Optional[ConfigManager] = None,
    overrides: Optional[SamplerOverrides] = None,
) -> Sampler:
    """
    Convenience function to create a Sampler from configuration.

    Args:
        chain: Network name (ethereum, base, arbitrum), defaults to DEFAULT_CHAIN
        config_manager: Configuration to read RPC URL and sampler address from
        overrides: Default execution context

    Returns:
        Sampler connected over HTTP to the chain's RPC URL
    """
    config_manager = config_manager or ConfigManager()
    chain = chain or config_manager.chains.DEFAULT_CHAIN
    chain_settings = config_manager.get_sampler_chain_config(chain)

    web3 = Web3(
        Web3.HTTPProvider(
            chain_settings["rpc_url"],
            request_kwargs={"timeout": chain_settings["rpc_timeout"]},
        )
    )
    logger.info(
        f"Sampler for {chain} at {chain_settings['sampler_address']} via {chain_settings['rpc_url']}"
    )
    return Sampler(
        web3,
        chain,
        overrides=overrides,
        contract_config=config_manager.contracts,
    )
