from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime

from litverse.utils.clock import utc_now


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(index=True, unique=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    subtotal: float
    discount: float = 0.0
    shipping: float
    tax: float
    total: float
    coupon_code: Optional[str] = None

    status: str = Field(default="processing")

    created_at: datetime = Field(default_factory=utc_now)

    items: List["OrderItem"] = Relationship(back_populates="order")


class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id")
    book_id: int = Field(foreign_key="book.id")

    book_title: str
    format: str = "physical"
    price: float
    quantity: int

    order: Optional["Order"] = Relationship(back_populates="items")
