"""Estimate a few calls with the default USD estimator."""
import asyncio
import logging

from azure_cost import AzureCostEstimator, CostInput, PricingNotFoundError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    estimator = AzureCostEstimator()

    calls = [
        CostInput(region="eastus", model="gpt-4", prompt_tokens=500, completion_tokens=1200),
        CostInput(region="eastus", model="gpt-3.5-turbo", prompt_tokens=1000, completion_tokens=500),
        # o-family spellings such as "o-3" or "O3" resolve to the same model
        CostInput(region="eastus", model="o3", prompt_tokens=1000, completion_tokens=500),
        CostInput(region="eastus", model="o3-mini", prompt_tokens=2000, completion_tokens=1000),
        CostInput(region="eastus", model="o4", prompt_tokens=1000, completion_tokens=500),
        CostInput(region="eastus", model="text-embedding-ada", prompt_tokens=1500),
        CostInput(region="eastus", model="dall-e-3", image_count=3),
    ]

    for call in calls:
        try:
            cost = await estimator.estimate_cost(call)
        except PricingNotFoundError as e:
            logger.warning(str(e))
            continue
        print(f"Estimated {call.model} cost: ${cost:.4f}")


if __name__ == "__main__":
    asyncio.run(main())
