"""
Market price sources - the current reference price per symbol.

The account only depends on the PriceFeed protocol. MarketPriceCache is the
in-memory implementation a host keeps updated from its market-data stream.
"""
import threading
from typing import Callable, Dict, List, Mapping, Optional, Protocol

from loguru import logger

from ..errors import MarketDataError


class PriceFeed(Protocol):
    """Anything that can quote a current price for a symbol."""

    def get_price(self, symbol: str) -> Optional[float]:
        """Return the current price, or None if the symbol is unknown."""
        ...


class MarketPriceCache:
    """
    Latest trade price per symbol, safe to update from one thread
    while the account reads from others.
    """

    def __init__(self, prices: Optional[Mapping[str, float]] = None):
        self._lock = threading.Lock()
        self._prices: Dict[str, float] = dict(prices or {})

    def __repr__(self) -> str:
        return f"MarketPriceCache(symbols={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._prices)

    def __contains__(self, symbol: object) -> bool:
        with self._lock:
            return symbol in self._prices

    def update(self, symbol: str, price: float) -> None:
        """Set the latest price for a symbol."""
        with self._lock:
            self._prices[symbol] = float(price)

    def update_many(self, prices: Mapping[str, float]) -> None:
        with self._lock:
            for symbol, price in prices.items():
                self._prices[symbol] = float(price)

    def remove(self, symbol: str) -> None:
        with self._lock:
            self._prices.pop(symbol, None)

    def get_price(self, symbol: str) -> Optional[float]:
        with self._lock:
            return self._prices.get(symbol)

    def symbols(self) -> List[str]:
        """Get list of symbols with a cached price."""
        with self._lock:
            return list(self._prices.keys())


class CallablePriceFeed:
    """Adapts a plain `symbol -> price` function to the PriceFeed protocol."""

    def __init__(self, func: Callable[[str], Optional[float]]):
        self._func = func

    def get_price(self, symbol: str) -> Optional[float]:
        return self._func(symbol)


def resolve_price(feed: PriceFeed, symbol: str) -> float:
    """
    Get a strictly positive price for a symbol.
    A missing, non-positive or failing quote raises MarketDataError.
    """
    try:
        price = feed.get_price(symbol)
    except MarketDataError:
        raise
    except Exception as exc:
        logger.debug(f"Price lookup failed for {symbol}: {exc}")
        raise MarketDataError(symbol, f"no market data for {symbol}: {exc}") from exc

    if price is None or price <= 0:
        raise MarketDataError(symbol)
    return float(price)
