from __future__ import annotations

from ..extensions import db


class CartItem(db.Model):
    """
    One persisted cart row: (user, product) -> quantity.

    A row with quantity 0 is never stored; the cart service deletes instead.
    """
    __tablename__ = "shopping_cart"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_shopping_cart_quantity_positive"),
    )

    user_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.product_id", ondelete="CASCADE"),
        primary_key=True,
    )
    quantity = db.Column(db.Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<CartItem user_id={self.user_id} product_id={self.product_id} quantity={self.quantity}>"
