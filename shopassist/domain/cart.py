"""
Cart Domain Models

The shopper's cart as persisted in client storage under the ``cart`` key.

Author: TM3
Date: 2026-10-15
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List

from pydantic import Field, ConfigDict, BaseModel
from pydantic.alias_generators import to_camel

from shopassist.domain.order import ShippingAddress
from shopassist.domain.product import Product


FREE_SHIPPING_THRESHOLD = Decimal('100')
FLAT_SHIPPING = Decimal('10')
TAX_RATE = Decimal('0.15')
CENTS = Decimal('0.01')


def to_money(value) -> str:
    """Two-decimal string, rounding half up"""
    return str(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))


class CartItem(Product):
    """A product copy plus the quantity the shopper wants"""
    qty: int = Field(1, description="Quantity in cart", ge=1)
    user_id: Optional[str] = Field(None, description="Owner, for user-specific carts")

    @property
    def line_total(self) -> Decimal:
        return Decimal(str(self.price)) * self.qty


class Cart(BaseModel):
    """
    Cart domain model

    Prices are kept as two-decimal strings, the format the storefront UI
    stores and displays.
    """

    cart_items: List[CartItem] = Field(default_factory=list)
    shipping_address: Optional[ShippingAddress] = None
    payment_method: str = "PayPal"
    items_price: str = "0.00"
    shipping_price: str = "0.00"
    tax_price: str = "0.00"
    total_price: str = "0.00"

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @property
    def items_count(self) -> int:
        return len(self.cart_items)

    def find(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.cart_items if item.id == product_id), None)

    def with_prices(self) -> "Cart":
        """Recompute items/shipping/tax/total from the line items"""
        items_price = sum((item.line_total for item in self.cart_items), Decimal('0'))
        items_price = items_price.quantize(CENTS, rounding=ROUND_HALF_UP)
        shipping_price = Decimal('0') if items_price > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
        tax_price = (TAX_RATE * items_price).quantize(CENTS, rounding=ROUND_HALF_UP)
        total_price = items_price + shipping_price + tax_price

        return self.model_copy(update={
            "items_price": to_money(items_price),
            "shipping_price": to_money(shipping_price),
            "tax_price": to_money(tax_price),
            "total_price": to_money(total_price),
        })

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
