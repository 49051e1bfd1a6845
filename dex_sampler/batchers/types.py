"""Value types shared by sampler operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from hexbytes import HexBytes


# Payload meaning "nothing to call, resolve locally". Real calldata always
# starts with a 4 byte selector so it never compares equal to this.
NULL_BYTES = HexBytes(b"")


class Protocol(str, Enum):
    """Liquidity source classifications."""

    UNISWAP_V2 = "uniswap_v2"
    SUSHISWAP = "sushiswap"
    PANCAKESWAP_V2 = "pancakeswap_v2"
    UNISWAP_V3 = "uniswap_v3"
    CURVE = "curve"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SamplerRoute:
    """A protocol plus the token path to quote through it."""

    protocol: Protocol
    path: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True)
class DexSample:
    """One input/output observation from a liquidity source."""

    protocol: Protocol
    input: int
    output: int


@dataclass(frozen=True)
class SamplerOverrides:
    """Execution context for a batch; ``None`` means the latest block."""

    block_number: Optional[int] = None

    @property
    def block_identifier(self):
        return self.block_number if self.block_number is not None else "latest"
