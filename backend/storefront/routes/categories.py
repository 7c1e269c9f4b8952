# Overview: Flask API routes for categories; public reads and admin-only writes.

from flask import Blueprint, request

from ..services import catalog_service
from ..models import Category
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from ..decorators import require_auth, require_admin

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/categories")


@categories_bp.get("")
def list_categories_route():
    return [c.to_dict() for c in catalog_service.list_categories()]


@categories_bp.get("/<int:category_id>")
def get_category_route(category_id: int):
    category = catalog_service.get_category(category_id)
    if category is None:
        return {"error": "Category not found"}, 404
    return category.to_dict()


@categories_bp.get("/<int:category_id>/products")
def list_category_products_route(category_id: int):
    try:
        products = catalog_service.list_products_by_category(category_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return [p.to_dict() for p in products]


@categories_bp.post("")
@require_auth
@require_admin
def create_category_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    created = catalog_service.create_category(patch=patch)
    return created.to_dict(), 201


@categories_bp.put("/<int:category_id>")
@require_auth
@require_admin
def update_category_route(category_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=True)
        updated = catalog_service.update_category(category_id=category_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated.to_dict()


@categories_bp.delete("/<int:category_id>")
@require_auth
@require_admin
def delete_category_route(category_id: int):
    try:
        catalog_service.delete_category(category_id=category_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409

    return "", 204
