import logging

import pytest

from azure_cost.models import PriceMeters, RetailPriceItem
from azure_cost.normalizer import classify_meter, normalize_price_items

from .conftest import DEFAULT_ITEMS


def _items(raw):
    return [RetailPriceItem.model_validate(item) for item in raw]


@pytest.mark.parametrize(
    "meter, dimension",
    [
        ("DALL-E Image", "image_price"),
        ("GPT-4 Prompt Tokens", "input_price"),
        ("gpt-4o Input Tokens", "input_price"),
        ("GPT-4 Completion Tokens", "output_price"),
        ("gpt-4o Output Tokens", "output_price"),
        ("Text embedding ada", "input_price"),
        ("Image Input Tokens", "image_price"),
        ("Training Hours", None),
    ],
)
def test_classify_meter(meter, dimension):
    assert classify_meter(meter) == dimension


def test_normalize_default_price_list():
    table = normalize_price_items(_items(DEFAULT_ITEMS))

    assert table["gpt-4"] == PriceMeters(input_price=0.03, output_price=0.06)
    assert table["gpt-35-turbo"] == PriceMeters(input_price=0.0015, output_price=0.002)
    assert table["text-embedding-ada"] == PriceMeters(input_price=0.0001)
    assert table["o3"] == PriceMeters(input_price=0.015, output_price=0.030)
    assert table["o3-mini"] == PriceMeters(input_price=0.0015, output_price=0.0020)


def test_image_price_is_divided_per_single_image():
    table = normalize_price_items(_items([{"meterName": "DALL-E Image", "skuName": "DALL-E", "unitPrice": 20}]))
    assert table["dall-e"].image_price == pytest.approx(0.20)
    assert table["dall-e"].input_price is None


def test_unrecognized_meters_are_dropped():
    table = normalize_price_items(
        _items(
            [
                {"meterName": "Training Hours", "skuName": "Fine-tuning", "unitPrice": 68},
                {"meterName": "GPT-4 Hosting", "skuName": "GPT-4", "unitPrice": 3},
            ]
        )
    )
    assert table == {}


def test_record_order_does_not_matter():
    forward = normalize_price_items(_items(DEFAULT_ITEMS))
    backward = normalize_price_items(_items(list(reversed(DEFAULT_ITEMS))))
    assert forward == backward


def test_duplicate_meter_last_write_wins_and_warns(caplog):
    raw = [
        {"meterName": "GPT-4 Prompt Tokens", "skuName": "GPT-4", "unitPrice": 0.03},
        {"meterName": "GPT-4 Prompt Tokens", "skuName": "GPT-4", "unitPrice": 0.04},
    ]
    with caplog.at_level(logging.WARNING, logger="azure_cost.normalizer"):
        table = normalize_price_items(_items(raw))

    assert table["gpt-4"].input_price == 0.04
    assert "Duplicate input_price meter for gpt-4" in caplog.text


def test_colliding_gpt_variants_merge_with_warning(caplog):
    raw = [
        {"meterName": "gpt-4o Input Tokens", "skuName": "gpt-4o", "unitPrice": 0.005},
        {"meterName": "gpt-4o-mini Input Tokens", "skuName": "gpt-4o-mini", "unitPrice": 0.00015},
    ]
    with caplog.at_level(logging.WARNING, logger="azure_cost.normalizer"):
        table = normalize_price_items(_items(raw))

    assert list(table) == ["gpt-4o"]
    assert table["gpt-4o"].input_price == 0.00015
    assert "Duplicate input_price meter for gpt-4o" in caplog.text


def test_null_fields_are_tolerated():
    item = RetailPriceItem.model_validate({"meterName": None, "skuName": None, "unitPrice": None, "retailPrice": 1})
    assert item.meter_name == ""
    assert item.unit_price == 0.0
    assert normalize_price_items([item]) == {}
