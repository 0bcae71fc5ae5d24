"""Pricing data models."""
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass
class PriceMeters:
    """Unit prices of one canonical model (in the configured currency)."""
    input_price: Optional[float] = None   # per 1000 input tokens
    output_price: Optional[float] = None  # per 1000 output tokens
    image_price: Optional[float] = None   # per single image

    def is_empty(self) -> bool:
        return self.input_price is None and self.output_price is None and self.image_price is None

    def to_dict(self) -> dict:
        """Convert to a plain dict."""
        return {
            "input_price": self.input_price,
            "output_price": self.output_price,
            "image_price": self.image_price,
        }


@dataclass
class RegionPricing:
    """Cached price table of one region."""
    fetched_at: float  # epoch ms
    meters: dict[str, PriceMeters] = field(default_factory=dict)

    def is_fresh(self, now_ms: float, ttl_ms: float) -> bool:
        return now_ms - self.fetched_at < ttl_ms


class RetailPriceItem(BaseModel):
    """One meter of the Azure Retail Prices API."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    meter_name: str = Field(default="", alias="meterName")
    sku_name: str = Field(default="", alias="skuName")
    unit_price: float = Field(default=0.0, alias="unitPrice")

    @field_validator("meter_name", "sku_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("unit_price", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class RetailPricePage(BaseModel):
    """One page of the Azure Retail Prices API response."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    items: list[RetailPriceItem] = Field(default_factory=list, alias="Items")
    next_page_link: Optional[str] = Field(default=None, alias="NextPageLink")


class CostInput(BaseModel):
    """Usage counters of a single Azure OpenAI call."""
    model_config = ConfigDict(frozen=True)

    region: str
    model: str
    prompt_tokens: Optional[int] = Field(default=None, ge=0)
    completion_tokens: Optional[int] = Field(default=None, ge=0)
    image_count: Optional[int] = Field(default=None, ge=0)
