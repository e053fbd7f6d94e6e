"""
Data Layer: Market price sources.
"""
from .price_feed import PriceFeed, MarketPriceCache, CallablePriceFeed, resolve_price

__all__ = [
    "PriceFeed",
    "MarketPriceCache",
    "CallablePriceFeed",
    "resolve_price",
]
