from pydantic import BaseModel, Field
from typing import Optional, List

from litverse.models.book import BOOK_FORMATS


class CartItemIn(BaseModel):
    book_id: int
    quantity: int = Field(1, ge=1)
    format: str = Field("physical", pattern="^(" + "|".join(BOOK_FORMATS) + ")$")


class QuoteRequest(BaseModel):
    items: List[CartItemIn] = Field(..., min_length=1)
    coupon_code: Optional[str] = None


class CheckoutRequest(QuoteRequest):
    shipping_address: Optional[dict] = None
