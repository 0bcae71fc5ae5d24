"""Errors raised while estimating a call's cost."""


class PricingNotFoundError(LookupError):
    """No price meters exist for the requested model in the region."""

    def __init__(self, model: str, region: str):
        self.model = model
        self.region = region
        super().__init__(f'Pricing for model "{model}" not found in region "{region}".')


class UnsupportedMeterShapeError(ValueError):
    """Price meters match none of the text, embedding or image shapes."""
