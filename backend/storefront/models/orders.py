from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .catalog import money


class Order(db.Model):
    """
    Order header. Written once by checkout and never updated.

    The shipping address is copied from the profile at checkout time so
    later profile edits do not rewrite history.
    """
    __tablename__ = "orders"
    __table_args__ = {"sqlite_autoincrement": True}

    order_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    date = db.Column(db.DateTime(timezone=True), nullable=False)
    address = db.Column(db.String(200), nullable=False)
    city = db.Column(db.String(50), nullable=False)
    state = db.Column(db.String(2), nullable=False)
    zip = db.Column(db.String(20), nullable=False)
    shipping_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    line_items = db.relationship(
        "OrderLineItem",
        back_populates="order",
        order_by="OrderLineItem.order_line_item_id",
        lazy="selectin",
    )

    def to_dict(self, available_product_ids: set[int] | None = None) -> dict:
        return {
            "orderId": self.order_id,
            "userId": self.user_id,
            "date": to_utc_z(self.date),
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
            "shippingAmount": money(self.shipping_amount),
            "lineItems": [
                item.to_dict(
                    product_available=(
                        None if available_product_ids is None
                        else item.product_id in available_product_ids
                    )
                )
                for item in self.line_items
            ],
        }


class OrderLineItem(db.Model):
    """
    One product on an order, with the product captured as it was at checkout.

    product_id has no foreign key: deleting a product must not
    break (or cascade into) historical orders.
    """
    __tablename__ = "order_line_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_order_line_items_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    order_line_item_id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.order_id"), nullable=False, index=True)

    # Product snapshot
    product_id = db.Column(db.Integer, nullable=False, index=True)
    product_name = db.Column(db.String(200), nullable=False)
    product_category_id = db.Column(db.Integer, nullable=True)
    product_color = db.Column(db.String(50), nullable=True)
    product_image_url = db.Column(db.String(255), nullable=True)

    sales_price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    discount = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    order = db.relationship("Order", back_populates="line_items")

    def to_dict(self, product_available: bool | None = None) -> dict:
        data = {
            "orderLineItemId": self.order_line_item_id,
            "orderId": self.order_id,
            "product": {
                "productId": self.product_id,
                "name": self.product_name,
                "categoryId": self.product_category_id,
                "color": self.product_color,
                "imageUrl": self.product_image_url,
            },
            "salesPrice": money(self.sales_price),
            "quantity": self.quantity,
            "discount": money(self.discount),
        }
        if product_available is not None:
            data["productAvailable"] = product_available
        return data
