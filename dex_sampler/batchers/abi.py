"""
ABI handling for the sampler contract.

Loads the contract ABI from the bundled JSON artifact and encodes/decodes
function calls with eth_abi.
"""

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Sequence, Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from hexbytes import HexBytes
from web3 import Web3

from .errors import BatchError, ContractError, DecodeError, ValidationError

logger = logging.getLogger(__name__)

SAMPLER_CONTRACT_FILE = "ERC20BridgeSampler.json"

# Error(string) and Panic(uint256)
ERROR_SELECTOR = bytes.fromhex("08c379a0")
PANIC_SELECTOR = bytes.fromhex("4e487b71")


def _canonical_type(param: Dict[str, Any]) -> str:
    """Expand ``tuple`` ABI params into their ``(a,b)`` canonical form."""
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        components = ",".join(_canonical_type(c) for c in param["components"])
        return f"({components}){abi_type[len('tuple'):]}"
    return abi_type


@dataclass(frozen=True)
class ContractFunction:
    """A single function entry from a contract ABI."""

    name: str
    input_types: Tuple[str, ...]
    output_types: Tuple[str, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return bytes(Web3.keccak(text=self.signature)[:4])


class ContractInterface:
    """
    Encoder/decoder for the functions of one contract ABI.

    Only plain functions are indexed; overloads are not supported since the
    sampler ABI has none.
    """

    def __init__(self, abi: List[Dict[str, Any]]):
        self._functions: Dict[str, ContractFunction] = {}
        for entry in abi:
            if entry.get("type") != "function":
                continue
            self._functions[entry["name"]] = ContractFunction(
                name=entry["name"],
                input_types=tuple(_canonical_type(p) for p in entry.get("inputs", [])),
                output_types=tuple(_canonical_type(p) for p in entry.get("outputs", [])),
            )

    @classmethod
    def from_json(cls, contract_file: str = SAMPLER_CONTRACT_FILE) -> "ContractInterface":
        """
        Load a contract interface from a JSON artifact in ``contracts/``.

        Raises:
            BatchError: If the file is missing or has no ABI
        """
        try:
            contract_path = os.path.join(
                os.path.dirname(__file__),
                "contracts",
                contract_file
            )

            with open(contract_path, "r") as f:
                contract_data = json.load(f)

            return cls(contract_data["abi"])

        except (FileNotFoundError, KeyError, json.JSONDecodeError) as e:
            raise BatchError(f"Failed to load contract ABI: {e}") from e

    def get_function(self, name: str) -> ContractFunction:
        try:
            return self._functions[name]
        except KeyError:
            raise ContractError(f"Function {name} not found in contract ABI") from None

    def encode_function_data(self, name: str, args: Sequence[Any]) -> HexBytes:
        """
        Encode a call to ``name`` as selector + ABI encoded arguments.

        Raises:
            ValidationError: If the arguments don't fit the function inputs
        """
        function = self.get_function(name)
        try:
            encoded_args = encode(list(function.input_types), list(args))
        except (EncodingError, TypeError, ValueError) as e:
            raise ValidationError(f"Failed to encode {function.signature}: {e}") from e
        return HexBytes(function.selector + encoded_args)

    def decode_function_result(self, name: str, data: bytes) -> Tuple[Any, ...]:
        """
        Decode the return data of ``name``.

        Raises:
            DecodeError: If the data doesn't match the function outputs
        """
        function = self.get_function(name)
        try:
            return decode(list(function.output_types), bytes(data))
        except DecodingError as e:
            raise DecodeError(
                f"Failed to decode {function.name} result 0x{bytes(data).hex()}: {e}"
            ) from e

    def decode_error_result(self, data: bytes) -> str:
        """Return a readable revert reason; falls back to the raw hex."""
        data = bytes(data)
        if not data:
            return "no revert data"

        selector, payload = data[:4], data[4:]
        try:
            if selector == ERROR_SELECTOR:
                (reason,) = decode(["string"], payload)
                return reason
            if selector == PANIC_SELECTOR:
                (code,) = decode(["uint256"], payload)
                return f"Panic(0x{code:02x})"
        except (DecodingError, UnicodeDecodeError):
            logger.debug(f"Undecodable revert payload 0x{data.hex()}")

        return f"0x{data.hex()}"


@lru_cache(maxsize=None)
def load_sampler_interface() -> ContractInterface:
    """Shared interface for the bundled sampler contract ABI."""
    return ContractInterface.from_json(SAMPLER_CONTRACT_FILE)
