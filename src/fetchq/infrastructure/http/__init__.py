"""HTTP fetch capability and its aiohttp implementation."""

from .aiohttp_client import AiohttpFetcher
from .base import BaseFetcher, SettlementCallback

__all__ = ["AiohttpFetcher", "BaseFetcher", "SettlementCallback"]
