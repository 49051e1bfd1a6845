"""Test configuration for sampler batchers."""
import pytest
from unittest.mock import Mock

from eth_abi import encode

from dex_sampler.batchers.abi import ERROR_SELECTOR
from dex_sampler.batchers.sampler import Sampler
from dex_sampler.config import ContractConfig


@pytest.fixture
def sampler_address():
    """Address the test sampler contract is deployed at."""
    return "0x5555555555555555555555555555555555555555"


@pytest.fixture
def contract_config(sampler_address):
    """Sampler addresses for the test networks."""
    return ContractConfig(sampler_addresses={"ethereum": sampler_address})


@pytest.fixture
def mock_web3():
    """Web3 double whose eth.call is set per test."""
    web3 = Mock()
    web3.eth.call = Mock()
    return web3


@pytest.fixture
def sampler(mock_web3, contract_config):
    """Sampler wired to the mocked provider."""
    return Sampler(mock_web3, "ethereum", contract_config=contract_config)


@pytest.fixture
def encode_samples():
    """Encode a uint256[] return value as sampleSells/BuysFromUniswapV2 would."""
    def _encode(values):
        return encode(["uint256[]"], [values])
    return _encode


@pytest.fixture
def batch_response():
    """Encode a batchCall return value from (data, success) slots."""
    def _encode(slots):
        return encode(["(bytes,bool)[]"], [[(bytes(data), success) for data, success in slots]])
    return _encode


@pytest.fixture
def revert_data():
    """Encode an Error(string) revert payload."""
    def _encode(reason):
        return ERROR_SELECTOR + encode(["string"], [reason])
    return _encode
