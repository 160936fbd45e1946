# cakestore/services/pricing.py
from dataclasses import dataclass
from decimal import Decimal

from cakestore.utils import settings
from cakestore.utils.money import percent_of


@dataclass(frozen=True)
class PriceBreakdown:
    items_price: int
    tax_price: int
    shipping_price: int
    total_price: int


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: Decimal
    shipping_price: int
    free_shipping_threshold: int
    enable_free_shipping: bool

    @classmethod
    def from_settings(cls) -> "PricingPolicy":
        return cls(
            tax_rate=settings.TAX_RATE,
            shipping_price=settings.SHIPPING_PRICE,
            free_shipping_threshold=settings.FREE_SHIPPING_THRESHOLD,
            enable_free_shipping=settings.ENABLE_FREE_SHIPPING,
        )

    def shipping_for(self, items_price: int) -> int:
        if self.enable_free_shipping and items_price >= self.free_shipping_threshold:
            return 0
        return self.shipping_price

    def quote(self, items_price: int) -> PriceBreakdown:
        tax = percent_of(items_price, self.tax_rate)
        shipping = self.shipping_for(items_price)
        return PriceBreakdown(
            items_price=items_price,
            tax_price=tax,
            shipping_price=shipping,
            total_price=items_price + tax + shipping,
        )
