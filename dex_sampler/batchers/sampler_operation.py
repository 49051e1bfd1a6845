"""
Sampler operation builders.

SamplerOperation builds per-source quote operations, expands routes into
those operations and composes them into single batch operations. It does
not talk to the network; see Sampler for execution.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from web3 import Web3

from .abi import ContractInterface, load_sampler_interface
from .errors import DecodeError, UnsupportedProtocolError, ValidationError
from .operations import (
    BatchContractOperation,
    ContractOperation,
    SamplerContractOperation,
    SourceContractOperation,
    T,
    TResult,
)
from .types import DexSample, Protocol, SamplerRoute

logger = logging.getLogger(__name__)

SourceOperationBuilder = Callable[[Sequence[str], Sequence[int], Protocol], SourceContractOperation]


class SamplerOperation:
    """
    Builds sampler contract operations for one chain.

    Sell and buy samplers are looked up by protocol in a registry. V2 forks
    share the Uniswap V2 sampler but keep their own protocol tag.
    """

    def __init__(
        self,
        chain: str,
        contract_interface: Optional[ContractInterface] = None,
    ):
        self.chain = chain
        self.contract_interface = contract_interface or load_sampler_interface()

        self._sell_samplers: Dict[Protocol, SourceOperationBuilder] = {
            Protocol.UNISWAP_V2: self.get_uniswap_v2_sell_quotes,
            Protocol.SUSHISWAP: self.get_uniswap_v2_sell_quotes,
            Protocol.PANCAKESWAP_V2: self.get_uniswap_v2_sell_quotes,
        }
        self._buy_samplers: Dict[Protocol, SourceOperationBuilder] = {
            Protocol.UNISWAP_V2: self.get_uniswap_v2_buy_quotes,
            Protocol.SUSHISWAP: self.get_uniswap_v2_buy_quotes,
            Protocol.PANCAKESWAP_V2: self.get_uniswap_v2_buy_quotes,
        }

    @property
    def supported_sell_protocols(self) -> List[Protocol]:
        return list(self._sell_samplers)

    @property
    def supported_buy_protocols(self) -> List[Protocol]:
        return list(self._buy_samplers)

    def _validate_path(self, token_address_path: Sequence[str]) -> List[str]:
        """Checksum a token path, rejecting paths shorter than two tokens."""
        if len(token_address_path) < 2:
            raise ValidationError(
                f"Token path needs at least 2 addresses, got {len(token_address_path)}"
            )
        validated = []
        for addr in token_address_path:
            try:
                validated.append(Web3.to_checksum_address(addr))
            except (ValueError, TypeError) as e:
                raise ValidationError(f"Invalid address {addr}: {e}") from e
        return validated

    def get_uniswap_v2_sell_quotes(
        self,
        token_address_path: Sequence[str],
        taker_fill_amounts: Sequence[int],
        protocol: Protocol = Protocol.UNISWAP_V2,
    ) -> SourceContractOperation:
        return SamplerContractOperation(
            protocol=protocol,
            contract_interface=self.contract_interface,
            function_name="sampleSellsFromUniswapV2",
            function_params=[
                self._validate_path(token_address_path),
                list(taker_fill_amounts),
            ],
        )

    def get_uniswap_v2_buy_quotes(
        self,
        token_address_path: Sequence[str],
        maker_fill_amounts: Sequence[int],
        protocol: Protocol = Protocol.UNISWAP_V2,
    ) -> SourceContractOperation:
        return SamplerContractOperation(
            protocol=protocol,
            contract_interface=self.contract_interface,
            function_name="sampleBuysFromUniswapV2",
            function_params=[
                self._validate_path(token_address_path),
                list(maker_fill_amounts),
            ],
        )

    def _expand_routes(
        self,
        samplers: Dict[Protocol, SourceOperationBuilder],
        side: str,
        amounts: Sequence[int],
        routes: Sequence[SamplerRoute],
    ) -> List[SourceContractOperation]:
        # Resolve every protocol before building anything
        builders = []
        for route in routes:
            builder = samplers.get(route.protocol)
            if builder is None:
                raise UnsupportedProtocolError(route.protocol, side)
            builders.append(builder)

        return [
            builder(route.path, amounts, route.protocol)
            for builder, route in zip(builders, routes)
        ]

    def get_sell_quote_operations(
        self, amounts: Sequence[int], routes: Sequence[SamplerRoute]
    ) -> List[SourceContractOperation]:
        """One sell sampling operation per route, in route order."""
        return self._expand_routes(self._sell_samplers, "sell", amounts, routes)

    def get_buy_quote_operations(
        self, amounts: Sequence[int], routes: Sequence[SamplerRoute]
    ) -> List[SourceContractOperation]:
        """One buy sampling operation per route, in route order."""
        return self._expand_routes(self._buy_samplers, "buy", amounts, routes)

    def get_sell_quotes(
        self, amounts: Sequence[int], routes: Sequence[SamplerRoute]
    ) -> ContractOperation[List[List[DexSample]]]:
        """
        Sample sells for every route in a single batch operation.

        Args:
            amounts: Taker token amounts, shared by all routes
            routes: Protocol and token path per route

        Returns:
            Operation resolving to one list of DexSample per route
        """
        sub_ops = self.get_sell_quote_operations(amounts, routes)
        return self.create_batch(
            sub_ops,
            lambda samples: self._to_dex_samples(amounts, routes, samples),
            lambda: [],
        )

    def get_buy_quotes(
        self, amounts: Sequence[int], routes: Sequence[SamplerRoute]
    ) -> ContractOperation[List[List[DexSample]]]:
        """
        Sample buys for every route in a single batch operation.

        Args:
            amounts: Maker token amounts, shared by all routes
            routes: Protocol and token path per route

        Returns:
            Operation resolving to one list of DexSample per route
        """
        sub_ops = self.get_buy_quote_operations(amounts, routes)
        return self.create_batch(
            sub_ops,
            lambda samples: self._to_dex_samples(amounts, routes, samples),
            lambda: [],
        )

    @staticmethod
    def _to_dex_samples(
        amounts: Sequence[int],
        routes: Sequence[SamplerRoute],
        samples: List[List[int]],
    ) -> List[List[DexSample]]:
        # A reverted route decodes to [], anything else pairs up with amounts
        for i, route in enumerate(routes):
            if samples[i] and len(samples[i]) != len(amounts):
                raise DecodeError(
                    f"Route {i} ({route.protocol}) returned {len(samples[i])} samples "
                    f"for {len(amounts)} amounts"
                )

        return [
            [
                DexSample(protocol=route.protocol, input=amounts[j], output=output)
                for j, output in enumerate(samples[i])
            ]
            for i, route in enumerate(routes)
        ]

    def create_batch(
        self,
        sub_ops: Sequence[ContractOperation[TResult]],
        result_handler: Callable[[List[TResult]], T],
        revert_handler: Callable[[], T],
    ) -> ContractOperation[T]:
        """Wrap ``sub_ops`` into a single ``batchCall`` operation."""
        return BatchContractOperation(
            self.contract_interface, sub_ops, result_handler, revert_handler
        )
