"""Azure Retail Prices API client: fetches Azure OpenAI price meters.

API endpoint: GET https://prices.azure.com/api/retail/prices?$filter=...
Results are paginated; every page carries a NextPageLink until the last one.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from .config import settings
from .models import RetailPriceItem, RetailPricePage

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves untouched besides the unreserved set
_FILTER_SAFE_CHARS = "!*'()"


def build_price_filter(service_name: str, region: str, currency: str) -> str:
    """Build the OData filter selecting one service, region and currency."""
    return (
        f"serviceName eq '{service_name}' "
        f"and armRegionName eq '{region}' "
        f"and currencyCode eq '{currency}'"
    )


def build_prices_url(
    region: str,
    currency: str,
    endpoint: Optional[str] = None,
    service_name: Optional[str] = None,
) -> str:
    """Build the first page URL for a region's price list."""
    endpoint = endpoint or settings.prices_api_url
    service_name = service_name or settings.service_name
    price_filter = build_price_filter(service_name, region, currency)
    return f"{endpoint}?$filter={quote(price_filter, safe=_FILTER_SAFE_CHARS)}"


async def fetch_retail_prices(
    region: str,
    currency: str,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[RetailPriceItem]:
    """Fetch every price meter of a region, following NextPageLink.

    Args:
        region: Azure region short name, e.g. "eastus"
        currency: ISO currency code used in the filter
        timeout: request timeout in seconds, defaults to settings.request_timeout
        transport: optional httpx transport (used by tests)

    Returns:
        All items of all pages, in page order

    Raises:
        httpx.HTTPError: request failed or returned a non-2xx status
        ValueError: response body is not valid JSON or has the wrong shape
    """
    if timeout is None:
        timeout = settings.request_timeout

    logger.info(f"Fetching Azure retail prices for region={region} currency={currency}")

    items: list[RetailPriceItem] = []
    next_url: Optional[str] = build_prices_url(region, currency)
    pages = 0

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        while next_url:
            response = await client.get(next_url)
            response.raise_for_status()

            page = RetailPricePage.model_validate(response.json())
            items.extend(page.items)
            pages += 1
            next_url = page.next_page_link

    logger.info(f"Fetched {len(items)} price items in {pages} page(s) for region={region}")
    return items
