"""
Batched sampling of liquidity sources.

This package packs many read-only sampler calls into one eth.call() and
decodes each call's result, absorbing per-call reverts.
"""

from .abi import ContractInterface, load_sampler_interface
from .errors import (
    BatchError,
    ContractError,
    DecodeError,
    RemoteExecutionError,
    UnsupportedProtocolError,
    ValidationError,
)
from .operations import (
    BatchContractOperation,
    ContractOperation,
    SamplerContractOperation,
    SourceContractOperation,
)
from .sampler import Sampler, build_sampler
from .sampler_operation import SamplerOperation
from .types import NULL_BYTES, DexSample, Protocol, SamplerOverrides, SamplerRoute

__all__ = [
    'ContractInterface',
    'load_sampler_interface',
    'BatchError',
    'ContractError',
    'DecodeError',
    'RemoteExecutionError',
    'UnsupportedProtocolError',
    'ValidationError',
    'BatchContractOperation',
    'ContractOperation',
    'SamplerContractOperation',
    'SourceContractOperation',
    'Sampler',
    'build_sampler',
    'SamplerOperation',
    'NULL_BYTES',
    'DexSample',
    'Protocol',
    'SamplerOverrides',
    'SamplerRoute',
]
