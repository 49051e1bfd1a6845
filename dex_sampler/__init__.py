"""Batched on-chain liquidity sampling."""

__version__ = "0.1.0"
