from __future__ import annotations

from flask import current_app

from ..extensions import db


def money(value) -> str | None:
    """Serialize a Numeric(10, 2) value for JSON ("12.50")."""
    if value is None:
        return None
    return f"{value:.2f}"


class Category(db.Model):
    """Catalog grouping. Outlives every product that points at it."""
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    category_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Category id={self.category_id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "categoryId": self.category_id,
            "name": self.name,
            "description": self.description,
        }


class Product(db.Model):
    """
    Product master data.

    stock is a plain mutable counter. It is only decremented inside the
    checkout transaction, after the row has been locked and checked, so it
    never drops below zero in a committed state.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_category_price", "category_id", "price"),
        {"sqlite_autoincrement": True},
    )

    product_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.category_id"), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    color = db.Column(db.String(50), nullable=True)
    stock = db.Column(db.Integer, nullable=False, default=0)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    image_url = db.Column(db.String(255), nullable=True)

    category = db.relationship("Category", backref=db.backref("products", lazy=True))

    def __repr__(self) -> str:
        return f"<Product id={self.product_id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": money(self.price),
            "categoryId": self.category_id,
            "description": self.description,
            "color": self.color,
            "stock": self.stock,
            "featured": self.featured,
            "imageUrl": self.image_url or current_app.config["PLACEHOLDER_IMAGE_URL"],
        }
