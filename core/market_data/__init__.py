"""Market data sources."""

from core.market_data.binance_client import BinanceMarketData, filter_top_symbols, parse_klines
from core.market_data.interfaces import MarketDataSource

__all__ = [
    "BinanceMarketData",
    "MarketDataSource",
    "filter_top_symbols",
    "parse_klines",
]
