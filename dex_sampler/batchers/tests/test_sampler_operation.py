"""Tests for route expansion and quote operation building."""

import pytest

from dex_sampler.batchers.errors import DecodeError, UnsupportedProtocolError, ValidationError
from dex_sampler.batchers.sampler_operation import SamplerOperation
from dex_sampler.batchers.types import DexSample, Protocol, SamplerRoute

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


@pytest.fixture
def operations():
    return SamplerOperation("ethereum")


class TestOperationFactory:
    """Test per-source operation constructors."""

    def test_default_protocol_tag(self, operations):
        """Constructors tag operations with their canonical protocol."""
        op = operations.get_uniswap_v2_sell_quotes([WETH, USDC], [1])
        assert op.protocol == Protocol.UNISWAP_V2
        assert op.function_name == "sampleSellsFromUniswapV2"

    def test_protocol_override(self, operations):
        """An aliased protocol keeps its own tag on the shared query."""
        op = operations.get_uniswap_v2_buy_quotes([WETH, USDC], [1], protocol=Protocol.SUSHISWAP)
        assert op.protocol == Protocol.SUSHISWAP
        assert op.function_name == "sampleBuysFromUniswapV2"

    @pytest.mark.parametrize("path", [[], [WETH]])
    def test_short_path_rejected(self, operations, path):
        """A path needs at least two tokens."""
        with pytest.raises(ValidationError, match="at least 2 addresses"):
            operations.get_uniswap_v2_sell_quotes(path, [1])

    def test_invalid_address_rejected(self, operations):
        """Paths are checksummed and invalid addresses rejected."""
        with pytest.raises(ValidationError, match="Invalid address"):
            operations.get_uniswap_v2_sell_quotes([WETH, "0x1234"], [1])


class TestRouteExpansion:
    """Test expansion of routes into sampler operations."""

    def test_sell_routes_in_order(self, operations):
        """One operation per route, tagged with the route's protocol."""
        routes = [
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, USDC]),
            SamplerRoute(Protocol.SUSHISWAP, [WETH, DAI]),
            SamplerRoute(Protocol.PANCAKESWAP_V2, [USDC, WETH, DAI]),
        ]
        ops = operations.get_sell_quote_operations([100, 200], routes)

        assert [op.protocol for op in ops] == [
            Protocol.UNISWAP_V2,
            Protocol.SUSHISWAP,
            Protocol.PANCAKESWAP_V2,
        ]
        assert all(op.function_name == "sampleSellsFromUniswapV2" for op in ops)
        assert all(op.function_params[1] == (100, 200) for op in ops)
        assert ops[2].function_params[0] == (USDC, WETH, DAI)

    def test_buy_routes_use_buy_sampler(self, operations):
        """Buy expansion builds sampleBuys operations."""
        ops = operations.get_buy_quote_operations(
            [5], [SamplerRoute(Protocol.SUSHISWAP, [WETH, USDC])]
        )
        assert len(ops) == 1
        assert ops[0].function_name == "sampleBuysFromUniswapV2"
        assert ops[0].protocol == Protocol.SUSHISWAP

    def test_same_protocol_routes_stay_separate(self, operations):
        """Two routes sharing a protocol expand into two operations."""
        routes = [
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, USDC]),
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, DAI]),
        ]
        ops = operations.get_sell_quote_operations([1], routes)

        assert len(ops) == 2
        assert ops[0] is not ops[1]
        assert ops[0].encode_call() != ops[1].encode_call()

    @pytest.mark.parametrize("side", ["sell", "buy"])
    def test_unsupported_protocol_fails_whole_expansion(self, operations, side):
        """An unregistered protocol aborts expansion with no partial output."""
        routes = [
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, USDC]),
            SamplerRoute(Protocol.UNISWAP_V3, [WETH, DAI]),
        ]
        expand = getattr(operations, f"get_{side}_quote_operations")

        with pytest.raises(UnsupportedProtocolError) as exc_info:
            expand([1], routes)

        assert exc_info.value.protocol == Protocol.UNISWAP_V3
        assert f"Unsupported {side} sample protocol: uniswap_v3" in str(exc_info.value)

    def test_supported_protocols(self, operations):
        """V2 forks are registered, V3 and Curve are not."""
        assert Protocol.SUSHISWAP in operations.supported_sell_protocols
        assert Protocol.CURVE not in operations.supported_buy_protocols


class TestQuoteComposition:
    """Test the route quote batch operations."""

    def test_sell_quotes_build_dex_samples(self, operations, encode_samples, batch_response):
        """Samples are routes-major, amounts-minor and keep route protocols."""
        amounts = [100, 200]
        routes = [
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, USDC]),
            SamplerRoute(Protocol.SUSHISWAP, [WETH, USDC]),
        ]
        quotes = operations.get_sell_quotes(amounts, routes)
        raw = batch_response([
            (encode_samples([10, 19]), True),
            (encode_samples([11, 20]), True),
        ])

        assert quotes.handle_call_results(raw) == [
            [
                DexSample(Protocol.UNISWAP_V2, 100, 10),
                DexSample(Protocol.UNISWAP_V2, 200, 19),
            ],
            [
                DexSample(Protocol.SUSHISWAP, 100, 11),
                DexSample(Protocol.SUSHISWAP, 200, 20),
            ],
        ]

    def test_reverted_route_has_no_samples(self, operations, encode_samples, revert_data, batch_response):
        """A reverted route yields an empty row; the others are kept."""
        routes = [
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, USDC]),
            SamplerRoute(Protocol.UNISWAP_V2, [WETH, DAI]),
        ]
        quotes = operations.get_buy_quotes([7], routes)
        raw = batch_response([
            (revert_data("UniswapV2Library: INSUFFICIENT_LIQUIDITY"), False),
            (encode_samples([3]), True),
        ])

        assert quotes.handle_call_results(raw) == [[], [DexSample(Protocol.UNISWAP_V2, 7, 3)]]

    @pytest.mark.parametrize("amounts, returned", [([100], [1, 2]), ([100, 200], [1])])
    def test_sample_count_mismatch_raises(
        self, operations, encode_samples, batch_response, amounts, returned
    ):
        """A route returning a different number of samples than amounts is malformed."""
        quotes = operations.get_sell_quotes(
            amounts,
            [SamplerRoute(Protocol.SUSHISWAP, [WETH, USDC])],
        )
        raw = batch_response([(encode_samples(returned), True)])

        with pytest.raises(DecodeError, match=r"Route 0 \(sushiswap\) returned"):
            quotes.handle_call_results(raw)

    def test_whole_batch_revert_yields_empty(self, operations, revert_data):
        """When the batch itself reverts there are no samples at all."""
        quotes = operations.get_sell_quotes([1], [SamplerRoute(Protocol.UNISWAP_V2, [WETH, USDC])])
        assert quotes.handle_revert(revert_data("boom")) == []

    def test_unsupported_route_fails_before_composition(self, operations):
        """Quote composition propagates expansion failures."""
        with pytest.raises(UnsupportedProtocolError):
            operations.get_sell_quotes([1], [SamplerRoute(Protocol.CURVE, [WETH, USDC])])
