"""Cost calculator: ties price fetching, caching and cost computation together.

AzureCostEstimator is the core class of the package:
- fetches a region's Azure OpenAI price list on first use and after the TTL
- keeps one in-memory price table per region
- maps user model names to canonical keys
- computes the cost of a single call
"""

import asyncio
import logging
import time
from typing import Optional

import httpx

from .config import settings
from .exceptions import PricingNotFoundError, UnsupportedMeterShapeError
from .model_matcher import canonicalize
from .models import CostInput, PriceMeters, RegionPricing
from .normalizer import normalize_price_items
from .retail_prices_client import fetch_retail_prices

logger = logging.getLogger(__name__)

COST_PRECISION = 6


def compute_cost(meters: PriceMeters, cost_input: CostInput) -> float:
    """Compute the cost of one call from its model's price meters.

    Args:
        meters: unit prices of the model
        cost_input: usage counters of the call

    Returns:
        Cost in the meters' currency, rounded to 6 decimals

    Raises:
        UnsupportedMeterShapeError: meters fit no text/embedding/image shape
    """
    if meters.is_empty():
        raise UnsupportedMeterShapeError("Unable to determine cost: model has no price meters.")

    # Text models; input-only meters are embeddings and bill prompt tokens only
    if meters.input_price is not None:
        prompt_tokens = cost_input.prompt_tokens or 0
        completion_tokens = cost_input.completion_tokens or 0
        cost = (prompt_tokens / 1000) * meters.input_price
        cost += (completion_tokens / 1000) * (meters.output_price or 0)
        return round(cost, COST_PRECISION)

    # Image models, billed per image
    if meters.image_price is not None:
        image_count = 1 if cost_input.image_count is None else cost_input.image_count
        return round(image_count * meters.image_price, COST_PRECISION)

    raise UnsupportedMeterShapeError("Unable to determine cost: unsupported input combination.")


def _now_ms() -> float:
    return time.time() * 1000


class AzureCostEstimator:
    """Azure OpenAI cost estimator.

    Each instance owns its own price cache, so estimators configured with
    different currencies or TTLs never share tables.
    """

    def __init__(
        self,
        currency: Optional[str] = None,
        cache_ttl: Optional[int] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Create an estimator.

        Args:
            currency: billing currency code, defaults to settings.currency ("USD")
            cache_ttl: cache TTL in milliseconds, defaults to settings.cache_ttl_ms (24h)
            transport: optional httpx transport for the Retail Prices API
        """
        self._currency = settings.currency if currency is None else currency
        self._cache_ttl = settings.cache_ttl_ms if cache_ttl is None else cache_ttl
        self._transport = transport

        # region -> cached table
        self._cache: dict[str, RegionPricing] = {}
        # region -> running fetch, shared by concurrent callers
        self._inflight: dict[str, asyncio.Task] = {}

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def cache_ttl(self) -> int:
        return self._cache_ttl

    def _is_fresh(self, region: str) -> bool:
        entry = self._cache.get(region)
        return entry is not None and entry.is_fresh(_now_ms(), self._cache_ttl)

    async def _refresh(self, region: str) -> None:
        items = await fetch_retail_prices(region, self._currency, transport=self._transport)
        meters = normalize_price_items(items)
        self._cache[region] = RegionPricing(fetched_at=_now_ms(), meters=meters)
        logger.info(f"Azure pricing for {region} updated: {len(meters)} models ({self._currency})")

    async def ensure_fresh(self, region: str) -> None:
        """Make sure the region's price table is younger than the cache TTL.

        Stale or missing tables are fetched and replaced wholesale. Concurrent
        calls for the same region wait on a single fetch.
        """
        region = region.lower()
        if self._is_fresh(region):
            logger.debug(f"Using cached pricing for {region}")
            return

        task = self._inflight.get(region)
        if task is None:
            task = asyncio.ensure_future(self._refresh(region))
            self._inflight[region] = task

            def _done(finished: asyncio.Task) -> None:
                if self._inflight.get(region) is finished:
                    del self._inflight[region]

            task.add_done_callback(_done)
        else:
            logger.debug(f"Waiting for in-flight pricing fetch for {region}")

        await asyncio.shield(task)

    async def get_model_pricing(self, region: str, model: str) -> Optional[PriceMeters]:
        """Get the price meters of a model in a region.

        Args:
            region: Azure region short name
            model: model name as the user spells it

        Returns:
            PriceMeters, or None if the region's price list has no such model
        """
        region = region.lower()
        await self.ensure_fresh(region)
        return self._cache[region].meters.get(canonicalize(model))

    async def estimate_cost(self, cost_input: CostInput) -> float:
        """Estimate the cost of a single Azure OpenAI call.

        Args:
            cost_input: region, model and usage counters of the call

        Returns:
            Estimated cost in the configured currency, rounded to 6 decimals

        Raises:
            PricingNotFoundError: the model has no price in the region
            UnsupportedMeterShapeError: the model's meters are malformed
            httpx.HTTPError: fetching the price list failed
        """
        region = cost_input.region.lower()
        meters = await self.get_model_pricing(region, cost_input.model)
        if meters is None:
            raise PricingNotFoundError(cost_input.model, region)

        cost = compute_cost(meters, cost_input)
        logger.debug(f"Estimated cost for {cost_input.model} in {region}: {cost} {self._currency}")
        return cost

    def get_cache_info(self) -> dict:
        """Get cache status per region."""
        now = _now_ms()
        return {
            "currency": self._currency,
            "cache_ttl": self._cache_ttl,
            "regions": {
                region: {
                    "models_count": len(entry.meters),
                    "fetched_at": entry.fetched_at,
                    "age": now - entry.fetched_at,
                    "needs_update": not entry.is_fresh(now, self._cache_ttl),
                    "models": {key: meters.to_dict() for key, meters in entry.meters.items()},
                }
                for region, entry in self._cache.items()
            },
        }

    def clear_cache(self, region: Optional[str] = None) -> None:
        """Drop cached pricing so the next request refetches it.

        Args:
            region: region to drop, or None to drop every region
        """
        if region is None:
            self._cache.clear()
            logger.info("Azure pricing cache cleared")
        else:
            self._cache.pop(region.lower(), None)
            logger.info(f"Azure pricing cache cleared for {region.lower()}")
