"""Etherscan client package split by request/classification/bytecode flows."""

from .base import EtherscanTransportError
from .fetcher import EtherscanClient

__all__ = ["EtherscanClient", "EtherscanTransportError"]
