# Overview: Service-layer operations for the catalog; categories, products and stock.

"""
Catalog Service

Products and categories. The service is auth-agnostic: the HTTP layer
decides who may call the write operations.

adjust_stock() is the one operation meant to run inside someone else's
transaction (checkout). It takes the caller's session, never commits, and
applies the change as a single relative UPDATE.
"""
from __future__ import annotations

from ..extensions import db
from ..models import CartItem, Category, Product
from ..validation import ConflictError, NotFoundError, ValidationError
from .product_search import ProductSearchFilters, all_products_query, build_search_query

CATEGORY_MUTABLE_FIELDS = {"name", "description"}
PRODUCT_MUTABLE_FIELDS = {
    "name", "price", "category_id", "description", "color", "stock", "featured", "image_url",
}


class StockAdjustmentError(RuntimeError):
    """
    Stock update matched no product row.

    Inside checkout this means the product was deleted under us; the
    enclosing transaction must roll back.
    """


def _apply_patch(obj, patch: dict, mutable_fields: set[str]) -> None:
    for k, v in patch.items():
        if k not in mutable_fields:
            continue
        setattr(obj, k, v)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.category_id.asc()).all()


def get_category(category_id: int) -> Category | None:
    return db.session.get(Category, category_id)


def create_category(*, patch: dict) -> Category:
    category = Category()
    _apply_patch(category, patch, CATEGORY_MUTABLE_FIELDS)
    db.session.add(category)
    db.session.commit()
    return category


def update_category(*, category_id: int, patch: dict) -> Category:
    category = get_category(category_id)
    if category is None:
        raise NotFoundError("category", category_id)
    _apply_patch(category, patch, CATEGORY_MUTABLE_FIELDS)
    db.session.commit()
    return category


def delete_category(*, category_id: int) -> None:
    """
    Delete a category.

    Raises:
        NotFoundError: unknown category
        ConflictError: products still reference it
    """
    category = get_category(category_id)
    if category is None:
        raise NotFoundError("category", category_id)

    in_use = db.session.query(Product.product_id).filter(Product.category_id == category_id).first()
    if in_use is not None:
        raise ConflictError("Category still has products; move or delete them first.")

    db.session.delete(category)
    db.session.commit()


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def get_product(product_id: int, *, session=None) -> Product | None:
    """Absent is a normal result, not an error."""
    if session is None:
        session = db.session
    return session.get(Product, product_id)


def search_products(filters: ProductSearchFilters) -> list[Product]:
    """
    Products matching every supplied filter.

    With no filters the search builder is skipped and all products are returned.
    """
    if filters.is_empty():
        stmt = all_products_query()
    else:
        stmt = build_search_query(filters)
    return list(db.session.scalars(stmt))


def list_products_by_category(category_id: int) -> list[Product]:
    if get_category(category_id) is None:
        raise NotFoundError("category", category_id)
    return search_products(ProductSearchFilters(category_id=category_id))


def _require_category(category_id: int | None) -> None:
    if category_id is not None and get_category(category_id) is None:
        raise ValidationError(f"categoryId {category_id} does not reference an existing category")


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict.

    Raises:
        ValidationError: category does not exist
    """
    _require_category(patch.get("category_id"))

    product = Product(stock=0, featured=False)
    _apply_patch(product, patch, PRODUCT_MUTABLE_FIELDS)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(*, product_id: int, patch: dict) -> Product:
    product = get_product(product_id)
    if product is None:
        raise NotFoundError("product", product_id)

    if "category_id" in patch:
        _require_category(patch["category_id"])

    _apply_patch(product, patch, PRODUCT_MUTABLE_FIELDS)
    db.session.commit()
    return product


def delete_product(*, product_id: int) -> None:
    """
    Hard-delete a product and any cart rows pointing at it.

    Order line items keep their own product snapshot and are not touched.
    """
    product = get_product(product_id)
    if product is None:
        raise NotFoundError("product", product_id)

    db.session.query(CartItem).filter(CartItem.product_id == product_id).delete(
        synchronize_session=False
    )
    db.session.delete(product)
    db.session.commit()


def adjust_stock(product_id: int, delta: int, *, session=None) -> None:
    """
    stock <- stock + delta, as one atomic relative UPDATE on the given session.

    Does not commit and does not enforce stock >= 0; callers pre-check.

    Raises:
        StockAdjustmentError: no such product
    """
    if session is None:
        session = db.session
    updated = (
        session.query(Product)
        .filter(Product.product_id == product_id)
        .update({Product.stock: Product.stock + delta}, synchronize_session="fetch")
    )
    if updated != 1:
        raise StockAdjustmentError(f"Stock update matched no product (product_id={product_id})")
