import logging
from collections import Counter
from uuid import uuid4
from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
from typing import List
from litverse.database import get_session
from litverse.errors import NotFoundError
from litverse.models.book import Book
from litverse.models.order import Order, OrderItem
from litverse.models.user import User
from litverse.schemas.checkout_schemas import CartItemIn, CheckoutRequest, QuoteRequest
from litverse.services.pricing import (
    CartLine,
    calculate_totals,
    lookup_coupon,
    price_checkout,
    round_money,
    to_money,
)
from litverse.utils.clock import utc_now
from litverse.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _cart_lines(session: Session, items: List[CartItemIn]):
    """Price every requested item from the catalog; client prices are never trusted."""
    books = {}
    for item in items:
        book = session.get(Book, item.book_id)
        if not book:
            raise NotFoundError(f"Book {item.book_id} not found")
        books[item.book_id] = book

    physical_wanted = Counter()
    for item in items:
        if item.format == "physical":
            physical_wanted[item.book_id] += item.quantity

    lines = []
    for item in items:
        book = books[item.book_id]
        available = getattr(book, f"{item.format}_available")
        if item.format == "physical":
            available = available and book.physical_stock >= physical_wanted[item.book_id]

        original = book.physical_original_price if item.format == "physical" else None
        lines.append(CartLine(
            book_id=book.id,
            unit_price=to_money(book.price_for(item.format)),
            quantity=item.quantity,
            original_unit_price=to_money(original) if original is not None else None,
            in_stock=available,
            title=book.title,
        ))
    return lines, books


def _order_number() -> str:
    return f"LV-{utc_now():%Y%m%d}-{uuid4().hex[:8].upper()}"


def _order_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "status": order.status,
        "date": order.created_at,
        "subtotal": order.subtotal,
        "discount": order.discount,
        "shipping": order.shipping,
        "tax": order.tax,
        "total": order.total,
        "couponCode": order.coupon_code,
        "items": [
            {
                "bookId": item.book_id,
                "title": item.book_title,
                "format": item.format,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in order.items
        ],
    }


# ---------- COUPONS ----------
@router.get("/coupons/{code}")
def validate_coupon(code: str, current_user: User = Depends(get_current_user)):
    coupon = lookup_coupon(code)
    return {"valid": True, "code": coupon.code, "discount": coupon.percent_off}


# ---------- QUOTE ----------
@router.post("/quote")
def quote(
    data: QuoteRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    lines, _ = _cart_lines(session, data.items)
    totals = calculate_totals(lines, data.coupon_code)

    return {
        "totals": totals.rounded(),
        "unavailable": [line.book_id for line in lines if not line.in_stock],
    }


# ---------- CHECKOUT ----------
@router.post("/checkout", status_code=status.HTTP_201_CREATED)
def checkout(
    data: CheckoutRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    lines, books = _cart_lines(session, data.items)
    totals = price_checkout(lines, data.coupon_code)
    display = totals.rounded()

    order = Order(
        order_number=_order_number(),
        user_id=current_user.id,
        subtotal=display["subtotal"],
        discount=display["discount"],
        shipping=display["shipping"],
        tax=display["tax"],
        total=display["total"],
        coupon_code=display["coupon"],
    )
    session.add(order)
    session.flush()

    for item, line in zip(data.items, lines):
        session.add(OrderItem(
            order_id=order.id,
            book_id=line.book_id,
            book_title=line.title,
            format=item.format,
            price=float(round_money(line.unit_price)),
            quantity=line.quantity,
        ))
        if item.format == "physical":
            book = books[line.book_id]
            book.physical_stock -= line.quantity
            session.add(book)

    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.order_number} placed by user {current_user.id} for {order.total}")

    return {
        "message": "Order placed successfully",
        "order": _order_dict(order),
    }


# ---------- ORDERS ----------
@router.get("/orders")
def list_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    orders = session.exec(
        select(Order).where(Order.user_id == current_user.id).order_by(Order.created_at.desc(), Order.id.desc())
    ).all()
    return {"orders": [_order_dict(o) for o in orders]}


@router.get("/orders/{order_id}")
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = session.get(Order, order_id)
    if not order or order.user_id != current_user.id:
        raise NotFoundError("Order not found")
    return {"order": _order_dict(order)}
