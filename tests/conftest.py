import httpx
import pytest

from azure_cost import cost_calculator

DEFAULT_ITEMS = [
    {"meterName": "GPT-4 Prompt Tokens", "skuName": "GPT-4", "unitPrice": 0.03},
    {"meterName": "GPT-4 Completion Tokens", "skuName": "GPT-4", "unitPrice": 0.06},
    {"meterName": "GPT-35-Turbo Prompt Tokens", "skuName": "GPT-35-Turbo", "unitPrice": 0.0015},
    {"meterName": "GPT-35-Turbo Completion Tokens", "skuName": "GPT-35-Turbo", "unitPrice": 0.002},
    {"meterName": "Text embedding ada", "skuName": "Text Embedding", "unitPrice": 0.0001},
    {"meterName": "DALL-E Image", "skuName": "DALL-E", "unitPrice": 20},
    {"meterName": "O3 Prompt Tokens", "skuName": "O3", "unitPrice": 0.015},
    {"meterName": "O3 Completion Tokens", "skuName": "O3", "unitPrice": 0.030},
    {"meterName": "O3-Mini Prompt Tokens", "skuName": "O3-Mini", "unitPrice": 0.0015},
    {"meterName": "O3-Mini Completion Tokens", "skuName": "O3-Mini", "unitPrice": 0.0020},
]


class PriceApi:
    """In-memory Azure Retail Prices API behind an httpx.MockTransport."""

    def __init__(self, pages=None):
        self.pages = pages if pages is not None else [DEFAULT_ITEMS]
        self.requests: list[httpx.Request] = []
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="error")
        page = int(request.url.params.get("page", "0"))
        body = {"Items": self.pages[page], "NextPageLink": None}
        if page + 1 < len(self.pages):
            body["NextPageLink"] = f"https://prices.azure.com/api/retail/prices?page={page + 1}"
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeClock:
    def __init__(self, now_ms: float = 1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture
def price_api():
    return PriceApi()


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(cost_calculator, "_now_ms", fake)
    return fake
