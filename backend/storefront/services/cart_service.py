# Overview: Service-layer operations for carts; persisted cart rows and the computed cart view.

"""
Cart Service

Two layers:
- the cart store: persisted (user, product, quantity) rows
- the cart aggregate: rows joined with live products, with line totals

Every store mutation commits on its own, except clear(commit=False), which
checkout uses to empty the cart inside its own transaction. A row with
quantity 0 is never written: setting 0 deletes the row instead.

The HTTP layer only ever passes the caller's own user_id.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import CartItem, Product
from ..models.catalog import money
from ..validation import CENT, ValidationError, to_int
from .concurrency import run_with_retry

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


class CartError(ValidationError):
    """Rejected cart input (e.g., a negative quantity)."""


# ---------------------------------------------------------------------------
# Cart store
# ---------------------------------------------------------------------------

def _rows_query(user_id: int, product_id: int | None = None, *, session=None):
    if session is None:
        session = db.session
    query = session.query(CartItem).filter(CartItem.user_id == user_id)
    if product_id is not None:
        query = query.filter(CartItem.product_id == product_id)
    return query


def get_rows(user_id: int) -> list[tuple[int, int]]:
    """(product_id, quantity) pairs for the user, in product order."""
    rows = _rows_query(user_id).order_by(CartItem.product_id.asc()).all()
    return [(row.product_id, row.quantity) for row in rows]


def exists(user_id: int, product_id: int) -> bool:
    return _rows_query(user_id, product_id).first() is not None


def add_product(user_id: int, product_id: int) -> None:
    """
    Add one unit of a product.

    The increment is a relative UPDATE, so concurrent adds never lose an
    increment. When no row exists yet a quantity-1 row is inserted; if a
    concurrent add inserted first, the primary key rejects ours and the
    retry takes the UPDATE path.
    """
    def _add():
        updated = _rows_query(user_id, product_id).update(
            {CartItem.quantity: CartItem.quantity + 1}, synchronize_session="fetch"
        )
        if updated == 0:
            db.session.add(CartItem(user_id=user_id, product_id=product_id, quantity=1))
        db.session.commit()

    run_with_retry(_add, retry_on=(IntegrityError,))


def set_quantity(user_id: int, product_id: int, quantity: int) -> None:
    """Overwrite the quantity, inserting when absent. quantity <= 0 removes the row."""
    if quantity <= 0:
        remove_product(user_id, product_id)
        return

    def _set():
        updated = _rows_query(user_id, product_id).update(
            {CartItem.quantity: quantity}, synchronize_session="fetch"
        )
        if updated == 0:
            db.session.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
        db.session.commit()

    run_with_retry(_set, retry_on=(IntegrityError,))


def remove_product(user_id: int, product_id: int) -> None:
    """Idempotent: removing an absent product is not an error."""
    _rows_query(user_id, product_id).delete(synchronize_session="fetch")
    db.session.commit()


def clear(user_id: int, *, session=None, commit: bool = True) -> None:
    """
    Delete every row of the user's cart. Idempotent.

    Pass the caller's session and commit=False to make the delete part of
    an enclosing transaction.
    """
    if session is None:
        session = db.session
    _rows_query(user_id, session=session).delete(synchronize_session="fetch")
    if commit:
        session.commit()


def parse_quantity(body) -> int:
    """
    Accept a bare integer or {"quantity": n} from a PUT body.

    0 is allowed (it removes the line); negatives are rejected.
    """
    if isinstance(body, dict):
        if "quantity" not in body:
            raise CartError("quantity is required")
        body = body["quantity"]
    if body is None:
        raise CartError("quantity is required")
    try:
        quantity = to_int(body, "quantity")
    except ValidationError as exc:
        raise CartError(str(exc))
    if quantity < 0:
        raise CartError("quantity must be >= 0")
    return quantity


# ---------------------------------------------------------------------------
# Cart aggregate
# ---------------------------------------------------------------------------

def compute_line_total(price: Decimal, quantity: int, discount_percent: Decimal = ZERO) -> Decimal:
    """price * quantity * (1 - discount_percent/100), rounded half-up to the cent."""
    gross = Decimal(price) * quantity
    net = gross * (1 - Decimal(discount_percent) / HUNDRED)
    return net.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    product: Product
    quantity: int
    discount_percent: Decimal = ZERO

    @property
    def line_total(self) -> Decimal:
        return compute_line_total(self.product.price, self.quantity, self.discount_percent)

    def to_dict(self) -> dict:
        return {
            "productId": self.product.product_id,
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "discountPercent": money(self.discount_percent),
            "lineTotal": money(self.line_total),
        }


@dataclass
class Cart:
    user_id: int
    items: dict[int, CartLine] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return sum((line.line_total for line in self.items.values()), ZERO)

    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "items": {str(pid): line.to_dict() for pid, line in self.items.items()},
            "total": money(self.total),
        }


def load_cart(user_id: int) -> Cart:
    """
    Build the cart view from the user's rows and the live products.

    Prices are the current product prices; nothing is captured here.
    """
    rows = (
        db.session.query(CartItem, Product)
        .outerjoin(Product, Product.product_id == CartItem.product_id)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.product_id.asc())
        .all()
    )

    cart = Cart(user_id=user_id)
    for row, product in rows:
        if product is None:
            current_app.logger.warning(
                "Cart of user %s references missing product %s; skipped", user_id, row.product_id
            )
            continue
        cart.items[product.product_id] = CartLine(product=product, quantity=row.quantity)
    return cart
