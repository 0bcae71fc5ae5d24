"""Azure OpenAI cost estimation.

Provides:
- Azure Retail Prices API fetching (paginated, per region and currency)
- model name canonicalization
- cost of a single call from prompt/completion tokens or image count

Usage:
    from azure_cost import AzureCostEstimator, CostInput

    estimator = AzureCostEstimator()
    cost = await estimator.estimate_cost(
        CostInput(region="eastus", model="gpt-4", prompt_tokens=500, completion_tokens=1200)
    )
"""

from .cost_calculator import AzureCostEstimator, compute_cost
from .exceptions import PricingNotFoundError, UnsupportedMeterShapeError
from .model_matcher import canonicalize, extract_model_key
from .models import CostInput, PriceMeters
from .normalizer import normalize_price_items

# Default instance
cost_estimator = AzureCostEstimator()

__all__ = [
    "cost_estimator",
    "AzureCostEstimator",
    "CostInput",
    "PriceMeters",
    "PricingNotFoundError",
    "UnsupportedMeterShapeError",
    "canonicalize",
    "compute_cost",
    "extract_model_key",
    "normalize_price_items",
]
