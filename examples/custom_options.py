"""Estimate in EUR with a one hour pricing cache."""
import asyncio
import logging

from azure_cost import AzureCostEstimator, CostInput

logging.basicConfig(level=logging.INFO)


async def main():
    estimator = AzureCostEstimator(currency="EUR", cache_ttl=60 * 60 * 1000)

    gpt4_cost = await estimator.estimate_cost(
        CostInput(region="westeurope", model="gpt-4-32k", prompt_tokens=5000, completion_tokens=1500)
    )
    print(f"Estimated GPT-4-32k cost: €{gpt4_cost:.4f}")

    # Served from the cached westeurope price table
    gpt35_cost = await estimator.estimate_cost(
        CostInput(region="westeurope", model="gpt-3.5-turbo", prompt_tokens=2000, completion_tokens=800)
    )
    print(f"Estimated GPT-3.5 Turbo cost: €{gpt35_cost:.4f}")
    print(estimator.get_cache_info())


if __name__ == "__main__":
    asyncio.run(main())
