"""
Cart pricing.

Pure functions over cart lines: no database, no settings lookups at call
time. Money is accumulated as unrounded ``Decimal`` and only rounded
(half-up, 2 places) when a caller asks for the display form.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Sequence

from litverse.config import settings
from litverse.errors import InvalidCouponError, UnavailableItemError, ValidationError

CENTS = Decimal("0.01")

# percent off, keyed by upper-cased code
COUPONS: Dict[str, int] = {
    "WELCOME10": 10,
    "SUMMER20": 20,
}


def to_money(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 19.99 as 19.99 instead of the binary float expansion
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartLine:
    book_id: int
    unit_price: Decimal
    quantity: int
    original_unit_price: Optional[Decimal] = None
    in_stock: bool = True
    title: str = ""

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price) * self.quantity

    @property
    def savings(self) -> Decimal:
        if self.original_unit_price is None:
            return Decimal("0")
        diff = to_money(self.original_unit_price) - to_money(self.unit_price)
        return max(diff, Decimal("0")) * self.quantity


@dataclass(frozen=True)
class Coupon:
    code: str
    percent_off: int


@dataclass(frozen=True)
class PricingRules:
    free_shipping_threshold: Decimal = Decimal("50.00")
    flat_shipping_rate: Decimal = Decimal("5.99")
    tax_rate: Decimal = Decimal("0.08")

    @classmethod
    def from_settings(cls, config=settings) -> "PricingRules":
        return cls(
            free_shipping_threshold=to_money(config.free_shipping_threshold),
            flat_shipping_rate=to_money(config.flat_shipping_rate),
            tax_rate=to_money(config.tax_rate),
        )


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    savings: Decimal = Decimal("0")
    coupon: Optional[Coupon] = None

    def rounded(self) -> Dict[str, float]:
        """Display form: every amount rounded half-up to cents."""
        return {
            "subtotal": float(round_money(self.subtotal)),
            "discount": float(round_money(self.discount)),
            "shipping": float(round_money(self.shipping)),
            "tax": float(round_money(self.tax)),
            "total": float(round_money(self.total)),
            "savings": float(round_money(self.savings)),
            "coupon": self.coupon.code if self.coupon else None,
        }


def lookup_coupon(code: str) -> Coupon:
    normalized = (code or "").strip().upper()
    if normalized not in COUPONS:
        raise InvalidCouponError(code)
    return Coupon(code=normalized, percent_off=COUPONS[normalized])


def calculate_totals(
    lines: Sequence[CartLine],
    coupon_code: Optional[str] = None,
    rules: Optional[PricingRules] = None,
) -> OrderTotals:
    if not lines:
        raise ValidationError("Cart is empty", details=["At least one line item is required"])

    bad = [line.book_id for line in lines if line.quantity < 1]
    if bad:
        raise ValidationError(
            "Invalid quantity",
            details=[f"Quantity for book {book_id} must be at least 1" for book_id in bad],
        )

    rules = rules or PricingRules.from_settings()
    coupon = lookup_coupon(coupon_code) if coupon_code else None

    subtotal = sum((line.line_total for line in lines), Decimal("0"))
    savings = sum((line.savings for line in lines), Decimal("0"))

    discount = Decimal("0")
    if coupon:
        discount = subtotal * Decimal(coupon.percent_off) / Decimal(100)

    # free shipping is decided before the coupon comes off
    shipping = Decimal("0") if subtotal > rules.free_shipping_threshold else rules.flat_shipping_rate
    discounted = subtotal - discount
    tax = discounted * rules.tax_rate
    total = discounted + shipping + tax

    return OrderTotals(
        subtotal=subtotal,
        discount=discount,
        shipping=shipping,
        tax=tax,
        total=total,
        savings=savings,
        coupon=coupon,
    )


def ensure_in_stock(lines: Sequence[CartLine]) -> None:
    unavailable = [line.book_id for line in lines if not line.in_stock]
    if unavailable:
        raise UnavailableItemError(unavailable)


def price_checkout(
    lines: Sequence[CartLine],
    coupon_code: Optional[str] = None,
    rules: Optional[PricingRules] = None,
) -> OrderTotals:
    """Totals for an order about to be placed; every line must be in stock."""
    if lines:
        ensure_in_stock(lines)
    return calculate_totals(lines, coupon_code, rules)
