# Overview: Flask API routes for products; public search and reads, admin-only writes.

"""
Product routes.

GET /products takes optional cat, minPrice, maxPrice and color query
parameters; every supplied one narrows the result. With none, the whole
catalog is returned.
"""
from flask import Blueprint, request

from ..services import catalog_service
from ..services.product_search import ProductSearchFilters
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    NotFoundError,
)
from ..decorators import require_auth, require_admin

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "price", "categoryId", "description", "color", "stock", "featured", "imageUrl",
    },
    required_on_create={"name", "price", "categoryId"},
    aliases={"categoryId": "category_id", "imageUrl": "image_url"},
)

products_bp = Blueprint("products", __name__, url_prefix="/products")


@products_bp.get("")
def search_products_route():
    try:
        filters = ProductSearchFilters.from_args(request.args)
    except ValidationError as e:
        return {"error": str(e)}, 400

    products = catalog_service.search_products(filters)
    return [p.to_dict() for p in products]


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    product = catalog_service.get_product(product_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return product.to_dict()


@products_bp.post("")
@require_auth
@require_admin
def create_product_route():
    """Create a new product. categoryId must reference an existing category."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = catalog_service.create_product(patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    return created.to_dict(), 201


@products_bp.put("/<int:product_id>")
@require_auth
@require_admin
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = catalog_service.update_product(product_id=product_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated.to_dict()


@products_bp.delete("/<int:product_id>")
@require_auth
@require_admin
def delete_product_route(product_id: int):
    """
    Delete a product. Cart rows for it go too; past orders keep their
    captured copy of the product.
    """
    try:
        catalog_service.delete_product(product_id=product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return "", 204
