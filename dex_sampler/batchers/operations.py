"""
Contract operations.

A contract operation knows how to encode its own call data, decode the
data returned by a successful call and produce a neutral result when the
call reverted. Operations are immutable and can be executed directly by a
Sampler or wrapped into a single ``batchCall`` with BatchContractOperation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, List, Sequence, Tuple, TypeVar

from hexbytes import HexBytes

from .abi import ContractInterface
from .errors import DecodeError
from .types import NULL_BYTES, Protocol

logger = logging.getLogger(__name__)

TResult = TypeVar("TResult")
T = TypeVar("T")


class ContractOperation(ABC, Generic[TResult]):
    """A read-only contract call with typed result handling."""

    @abstractmethod
    def encode_call(self) -> HexBytes:
        """Call data for this operation, or NULL_BYTES when there is nothing to call."""
        pass

    @abstractmethod
    def handle_call_results(self, call_results: bytes) -> TResult:
        """Decode the return data of a successful call."""
        pass

    @abstractmethod
    def handle_revert(self, call_results: bytes) -> TResult:
        """Neutral result for a reverted call. Must not raise."""
        pass


class SourceContractOperation(ContractOperation[List[int]]):
    """An operation sampling one liquidity source."""

    protocol: Protocol


class SamplerContractOperation(SourceContractOperation):
    """
    Calls one sampler function and returns its first output as a list of ints.

    An empty array parameter means there is nothing to sample, so the
    operation encodes to NULL_BYTES and resolves to an empty list without a
    remote call.
    """

    def __init__(
        self,
        protocol: Protocol,
        contract_interface: ContractInterface,
        function_name: str,
        function_params: Sequence[Any] = (),
    ):
        # Fail at construction on an unknown function name
        contract_interface.get_function(function_name)

        self.protocol = protocol
        self._contract_interface = contract_interface
        self._function_name = function_name
        self._function_params = tuple(
            tuple(p) if isinstance(p, list) else p for p in function_params
        )

    @property
    def function_name(self) -> str:
        return self._function_name

    @property
    def function_params(self) -> Tuple[Any, ...]:
        return self._function_params

    @property
    def is_noop(self) -> bool:
        return any(
            isinstance(p, tuple) and len(p) == 0 for p in self._function_params
        )

    def encode_call(self) -> HexBytes:
        if self.is_noop:
            return NULL_BYTES
        return self._contract_interface.encode_function_data(
            self._function_name, self._function_params
        )

    def handle_call_results(self, call_results: bytes) -> List[int]:
        if call_results == NULL_BYTES:
            return []
        decoded = self._contract_interface.decode_function_result(
            self._function_name, call_results
        )
        return list(decoded[0])

    def handle_revert(self, call_results: bytes) -> List[int]:
        msg = self._contract_interface.decode_error_result(call_results)
        logger.warning(
            f"Sampler operation: {self.protocol}.{self._function_name} reverted {msg}"
        )
        return []

    def __repr__(self) -> str:
        return (
            f"SamplerContractOperation(protocol={self.protocol}, "
            f"function={self._function_name})"
        )


def splice_call_results(
    ops: Sequence[ContractOperation],
    call_datas: Sequence[bytes],
    call_results: Sequence[Tuple[bytes, bool]],
) -> List[Any]:
    """
    Hand each operation its own slot of a batch result.

    ``call_results`` holds one ``(data, success)`` pair per call data that
    was actually sent, in sending order. Operations whose call data was
    NULL_BYTES were not sent and decode NULL_BYTES locally. Reverted slots
    go to the operation's ``handle_revert``.

    Raises:
        DecodeError: If the slot count doesn't match the calls sent
    """
    sent = sum(1 for call_data in call_datas if call_data != NULL_BYTES)
    if len(call_results) != sent:
        raise DecodeError(
            f"Expected {sent} call results, got {len(call_results)}"
        )

    remaining = iter(call_results)
    results = []
    for op, call_data in zip(ops, call_datas):
        if call_data == NULL_BYTES:
            results.append(op.handle_call_results(NULL_BYTES))
            continue
        data, success = next(remaining)
        if success:
            results.append(op.handle_call_results(data))
        else:
            results.append(op.handle_revert(data))
    return results


class BatchContractOperation(ContractOperation[T]):
    """
    Wraps several operations into one ``batchCall`` on the sampler.

    Sub-operation reverts are reported per slot by ``batchCall`` and are
    absorbed by each sub-operation. ``handle_revert`` only runs when the
    whole batch call reverted, in which case ``revert_handler`` supplies
    the result.
    """

    def __init__(
        self,
        contract_interface: ContractInterface,
        sub_ops: Sequence[ContractOperation[TResult]],
        result_handler: Callable[[List[TResult]], T],
        revert_handler: Callable[[], T],
    ):
        self._contract_interface = contract_interface
        self._sub_ops = tuple(sub_ops)
        self._result_handler = result_handler
        self._revert_handler = revert_handler

    def _sub_call_datas(self) -> List[HexBytes]:
        return [op.encode_call() for op in self._sub_ops]

    def encode_call(self) -> HexBytes:
        sub_calls = [cd for cd in self._sub_call_datas() if cd != NULL_BYTES]
        if not sub_calls:
            return NULL_BYTES
        return self._contract_interface.encode_function_data(
            "batchCall", [[bytes(cd) for cd in sub_calls]]
        )

    def handle_call_results(self, call_results: bytes) -> T:
        if call_results == NULL_BYTES:
            raw_sub_results = ()
        else:
            (raw_sub_results,) = self._contract_interface.decode_function_result(
                "batchCall", call_results
            )
        results = splice_call_results(
            self._sub_ops, self._sub_call_datas(), raw_sub_results
        )
        return self._result_handler(results)

    def handle_revert(self, call_results: bytes) -> T:
        msg = self._contract_interface.decode_error_result(call_results)
        logger.warning(
            f"Sampler batch of {len(self._sub_ops)} operations reverted {msg}"
        )
        return self._revert_handler()
