# Overview: Flask API routes for the caller's shopping cart.

"""
Cart routes. The cart always belongs to the authenticated caller; no route
takes a user id.

Every mutation returns the reloaded cart, except DELETE of a single
product (204).
"""
from flask import Blueprint, request, g

from ..services import cart_service, catalog_service
from ..services.cart_service import CartError
from ..decorators import require_auth

cart_bp = Blueprint("cart", __name__, url_prefix="/cart")


def _cart_response():
    return cart_service.load_cart(g.current_user.user_id).to_dict()


@cart_bp.get("")
@require_auth
def get_cart_route():
    return _cart_response()


@cart_bp.post("/products/<int:product_id>")
@require_auth
def add_product_route(product_id: int):
    if catalog_service.get_product(product_id) is None:
        return {"error": "Product not found"}, 404

    cart_service.add_product(g.current_user.user_id, product_id)
    return _cart_response()


@cart_bp.put("/products/<int:product_id>")
@require_auth
def set_quantity_route(product_id: int):
    """Body: a bare integer or {"quantity": n}. 0 removes the product."""
    try:
        quantity = cart_service.parse_quantity(request.get_json(silent=True))
    except CartError as e:
        return {"error": str(e)}, 400

    if quantity > 0 and catalog_service.get_product(product_id) is None:
        return {"error": "Product not found"}, 404

    cart_service.set_quantity(g.current_user.user_id, product_id, quantity)
    return _cart_response()


@cart_bp.delete("/products/<int:product_id>")
@require_auth
def remove_product_route(product_id: int):
    cart_service.remove_product(g.current_user.user_id, product_id)
    return "", 204


@cart_bp.delete("")
@require_auth
def clear_cart_route():
    cart_service.clear(g.current_user.user_id)
    return _cart_response()
