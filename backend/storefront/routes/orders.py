# Overview: Flask API routes for checkout and order history.

from flask import Blueprint, g

from ..services import checkout_service
from ..services.checkout_service import CheckoutError
from ..validation import NotFoundError
from ..decorators import require_auth

orders_bp = Blueprint("orders", __name__, url_prefix="/orders")


@orders_bp.post("")
@require_auth
def checkout_route():
    """
    Turn the caller's cart into an order.

    400 with {"error", "details"?} when checkout is refused; the cart and
    stock are then unchanged.
    """
    try:
        order = checkout_service.checkout(g.current_user.user_id)
    except CheckoutError as e:
        body = {"error": e.message}
        if e.details:
            body["details"] = e.details
        return body, 400

    return order.to_dict(), 200


@orders_bp.get("")
@require_auth
def list_orders_route():
    orders, available = checkout_service.list_orders(g.current_user.user_id)
    return [o.to_dict(available_product_ids=available) for o in orders]


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    try:
        order, available = checkout_service.get_order(g.current_user.user_id, order_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return order.to_dict(available_product_ids=available)
