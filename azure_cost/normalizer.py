"""Price list normalizer: groups raw Azure meters into per-model price meters."""

import logging
from typing import Iterable, Optional

from .model_matcher import extract_model_key
from .models import PriceMeters, RetailPriceItem

logger = logging.getLogger(__name__)

# Azure quotes image meters per 100 images
IMAGE_BATCH_SIZE = 100


def classify_meter(meter_name: str) -> Optional[str]:
    """Return the PriceMeters field a meter bills under, or None.

    Priority: image, input/prompt, output/completion, embedding. Embedding
    meters bill under input since embeddings have no completion cost.
    """
    name = meter_name.lower()
    if "image" in name:
        return "image_price"
    if "input" in name or "prompt" in name:
        return "input_price"
    if "output" in name or "completion" in name:
        return "output_price"
    if "embedding" in name:
        return "input_price"
    return None


def normalize_price_items(items: Iterable[RetailPriceItem]) -> dict[str, PriceMeters]:
    """Build the {canonical model key: PriceMeters} table of a region.

    Items whose names match no model rule (training, provisioned throughput,
    ...) or carry no billing dimension are skipped.
    """
    table: dict[str, PriceMeters] = {}
    skipped = 0

    for item in items:
        model_key = extract_model_key(item.meter_name, item.sku_name)
        if model_key is None:
            skipped += 1
            logger.debug(f"Skipping unrecognized meter: {item.meter_name!r} / {item.sku_name!r}")
            continue

        dimension = classify_meter(item.meter_name)
        if dimension is None:
            skipped += 1
            logger.debug(f"Skipping meter without billing dimension: {item.meter_name!r}")
            continue

        price = item.unit_price
        if dimension == "image_price":
            price = price / IMAGE_BATCH_SIZE

        meters = table.setdefault(model_key, PriceMeters())
        previous = getattr(meters, dimension)
        if previous is not None:
            logger.warning(
                f"Duplicate {dimension} meter for {model_key}: "
                f"{previous} replaced by {price} ({item.meter_name!r})"
            )
        setattr(meters, dimension, price)

    logger.debug(f"Normalized {len(table)} models, skipped {skipped} meters")
    return table
