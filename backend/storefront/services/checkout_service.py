# Overview: Service-layer operations for checkout; turns a cart into a committed order.

"""
Checkout Service

checkout() converts the caller's cart into an order in one database
transaction on one session:

    lock cart rows -> lock products -> check stock -> insert order header
    -> insert line items (price and product captured) -> decrement stock
    -> clear cart -> commit

Every statement runs on db.session, so the order insert, the stock
decrements and the cart delete commit or roll back together. On SQLite the
write lock is taken up front (BEGIN IMMEDIATE) because FOR UPDATE is
ignored there.

Business failures roll back and raise CheckoutError; the cart and stock are
left exactly as they were. Lock timeouts (OperationalError) are retried by
run_with_retry and surface as 503 if they persist.

A duplicate submit serializes on the cart lock: the second attempt sees an
empty cart.
"""
from __future__ import annotations

from decimal import Decimal

from flask import current_app

from ..extensions import db
from ..models import CartItem, Order, OrderLineItem, Product, Profile
from ..time_utils import utcnow
from ..validation import NotFoundError
from . import cart_service
from .catalog_service import adjust_stock
from .concurrency import begin_write_transaction, lock_for_update, run_with_retry

SHIPPING_AMOUNT = Decimal("0.00")


class CheckoutError(Exception):
    """Checkout refused; nothing was written. `details` is optional structured context."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InsufficientStockError(CheckoutError):
    def __init__(self, product: Product, requested: int):
        super().__init__(
            f"insufficient stock for {product.name}: available {product.stock}, requested {requested}",
            details={
                "productId": product.product_id,
                "available": product.stock,
                "requested": requested,
            },
        )


def _shipping_profile(user_id: int) -> Profile:
    profile = db.session.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is None or not profile.has_shipping_address():
        raise CheckoutError("incomplete shipping address")
    return profile


def _place_order(user_id: int) -> Order:
    session = db.session

    profile = _shipping_profile(user_id)
    if not cart_service.get_rows(user_id):
        raise CheckoutError("empty cart")

    try:
        begin_write_transaction(session)

        rows = lock_for_update(
            session.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.product_id.asc())
        ).all()
        if not rows:
            # Emptied by a concurrent checkout between the precheck and the lock
            raise CheckoutError("empty cart")

        # Lock products in product_id order so concurrent checkouts cannot deadlock
        products: dict[int, Product] = {}
        for row in rows:
            product = lock_for_update(
                session.query(Product).filter(Product.product_id == row.product_id)
            ).first()
            if product is None:
                raise CheckoutError(f"product {row.product_id} is no longer available")
            products[row.product_id] = product

        for row in rows:
            product = products[row.product_id]
            if product.stock < row.quantity:
                raise InsufficientStockError(product, row.quantity)

        order = Order(
            user_id=user_id,
            date=utcnow(),
            address=profile.address,
            city=profile.city,
            state=profile.state,
            zip=profile.zip,
            shipping_amount=SHIPPING_AMOUNT,
        )
        session.add(order)
        session.flush()

        # Capture every product value before the stock update refreshes the rows
        lines = [
            OrderLineItem(
                order=order,
                product_id=row.product_id,
                product_name=products[row.product_id].name,
                product_category_id=products[row.product_id].category_id,
                product_color=products[row.product_id].color,
                product_image_url=products[row.product_id].image_url,
                sales_price=products[row.product_id].price,
                quantity=row.quantity,
                discount=Decimal("0.00"),
            )
            for row in rows
        ]
        session.add_all(lines)
        session.flush()

        for line in lines:
            adjust_stock(line.product_id, -line.quantity, session=session)

        cart_service.clear(user_id, session=session, commit=False)

        session.commit()
    except CheckoutError as exc:
        session.rollback()
        current_app.logger.warning("Checkout for user %s rolled back: %s", user_id, exc)
        raise
    except Exception:
        session.rollback()
        raise

    current_app.logger.info(
        "Checkout committed order %s for user %s (%d lines)", order.order_id, user_id, len(lines)
    )
    return order


def checkout(user_id: int) -> Order:
    """
    Place an order from the user's cart.

    Raises:
        CheckoutError: incomplete shipping address, empty cart, or a cart product
            deleted before checkout locked it (all reported as 400)
        InsufficientStockError: a cart line asks for more than is in stock
    """
    return run_with_retry(lambda: _place_order(user_id))


def _available_product_ids(orders: list[Order]) -> set[int]:
    product_ids = {item.product_id for order in orders for item in order.line_items}
    if not product_ids:
        return set()
    found = db.session.query(Product.product_id).filter(Product.product_id.in_(product_ids)).all()
    return {pid for (pid,) in found}


def list_orders(user_id: int) -> tuple[list[Order], set[int]]:
    """The user's orders, oldest first, plus which of their products still exist."""
    orders = (
        db.session.query(Order)
        .filter(Order.user_id == user_id)
        .order_by(Order.order_id.asc())
        .all()
    )
    return orders, _available_product_ids(orders)


def get_order(user_id: int, order_id: int) -> tuple[Order, set[int]]:
    """Another user's order is reported as not found."""
    order = (
        db.session.query(Order)
        .filter(Order.order_id == order_id, Order.user_id == user_id)
        .first()
    )
    if order is None:
        raise NotFoundError("order", order_id)
    return order, _available_product_ids([order])
