"""
CoinGecko Price Client
Fetches USD prices, 24h change, search results and price history from CoinGecko
"""

import time
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

import requests

from .constants import COINGECKO_BASE_URL, PRICE_CACHE_TTL_SECONDS
from .errors import UpstreamAPIError
from .http_client import get_json
from .models import CoinGeckoPrice, Token

logger = logging.getLogger(__name__)


class CoinGeckoClient:
    """Price oracle client with a per-id in-memory TTL cache"""

    def __init__(self,
                 base_url: str = COINGECKO_BASE_URL,
                 cache_ttl: float = PRICE_CACHE_TTL_SECONDS,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time):
        """
        Initialize the price client

        Args:
            base_url: CoinGecko API root
            cache_ttl: Seconds a fetched price stays fresh
            session: Optional requests session
            clock: Time source, seconds since epoch
        """
        self.base_url = base_url
        self.cache_ttl = cache_ttl
        self.session = session
        self.clock = clock
        self._cache: Dict[str, Tuple[CoinGeckoPrice, float]] = {}

    def clear_cache(self):
        self._cache.clear()

    def _cached(self, coin_id: str, now: float) -> Optional[CoinGeckoPrice]:
        entry = self._cache.get(coin_id)
        if entry and now - entry[1] < self.cache_ttl:
            return entry[0]
        return None

    def get_prices_by_ids(self, ids: List[str]) -> Dict[str, CoinGeckoPrice]:
        """
        Fetch USD prices + 24h change for a list of CoinGecko IDs.

        Fresh cache entries are reused; everything else is fetched in a
        single request. If that request fails, uncached ids map to a zero
        price (which is not cached).
        """
        if not ids:
            return {}

        now = self.clock()
        result: Dict[str, CoinGeckoPrice] = {}
        uncached_ids: List[str] = []

        for coin_id in ids:
            cached = self._cached(coin_id, now)
            if cached is not None:
                result[coin_id] = cached
            elif coin_id not in uncached_ids:
                uncached_ids.append(coin_id)

        if not uncached_ids:
            return result

        params = {
            "ids": ",".join(uncached_ids),
            "vs_currencies": "usd",
            "include_24hr_change": "true",
            "include_market_cap": "true",
            "include_24hr_vol": "true",
        }

        try:
            data = get_json(f"{self.base_url}/simple/price", params=params,
                            service="CoinGecko", session=self.session)
        except UpstreamAPIError as e:
            logger.error(f"CoinGecko price fetch error: {e}")
            for coin_id in uncached_ids:
                result[coin_id] = CoinGeckoPrice()
            return result

        for coin_id in uncached_ids:
            coin = data.get(coin_id) if isinstance(data, dict) else None
            if not coin:
                continue
            price = CoinGeckoPrice(
                usd=coin.get("usd") or 0.0,
                usd_24h_change=coin.get("usd_24h_change") or 0.0,
                usd_market_cap=coin.get("usd_market_cap"),
                usd_24h_vol=coin.get("usd_24h_vol"),
            )
            self._cache[coin_id] = (price, now)
            result[coin_id] = price

        return result

    def enrich_tokens_with_prices(self, tokens: List[Token]) -> List[Token]:
        """Return copies of tokens with live USD price, value and 24h change"""
        coingecko_ids = [t.coingecko_id for t in tokens if t.coingecko_id]

        # ETH is always requested so the portfolio header can reuse the cache
        prices = self.get_prices_by_ids(["ethereum"] + coingecko_ids)

        enriched = []
        for token in tokens:
            price = prices.get(token.coingecko_id) if token.coingecko_id else None
            if price is None:
                enriched.append(token)
                continue
            enriched.append(replace(
                token,
                usd_price=price.usd,
                usd_value=token.balance_amount * price.usd,
                price_change_24h=price.usd_24h_change,
            ))
        return enriched

    def get_eth_price(self) -> CoinGeckoPrice:
        prices = self.get_prices_by_ids(["ethereum"])
        return prices.get("ethereum") or CoinGeckoPrice()

    def search_token(self, query: str) -> List[Dict[str, str]]:
        """Search coins by name or symbol, returning the top 5 matches"""
        try:
            data = get_json(f"{self.base_url}/search", params={"query": query},
                            service="CoinGecko", session=self.session)
            return [
                {
                    "id": coin["id"],
                    "symbol": coin["symbol"].upper(),
                    "name": coin["name"],
                }
                for coin in data["coins"][:5]
            ]
        except (UpstreamAPIError, AttributeError, KeyError, TypeError) as e:
            logger.error(f"CoinGecko search error: {e}")
            return []

    def get_historical_prices(self, coin_id: str, days: int = 7) -> List[Dict[str, float]]:
        """Daily USD prices for the last N days as [{time, price}, ...]"""
        params = {"vs_currency": "usd", "days": days, "interval": "daily"}
        try:
            data = get_json(f"{self.base_url}/coins/{coin_id}/market_chart",
                            params=params, service="CoinGecko", session=self.session)
            prices = data.get("prices", [])
        except (UpstreamAPIError, AttributeError) as e:
            logger.error(f"Historical price fetch failed for {coin_id}: {e}")
            return []

        return [{"time": point[0], "price": point[1]} for point in prices]
