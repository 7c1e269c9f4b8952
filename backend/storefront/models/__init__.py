from .catalog import Category, Product
from .auth import User, Profile, SessionToken
from .cart import CartItem
from .orders import Order, OrderLineItem

__all__ = [
    'Category', 'Product',
    'User', 'Profile', 'SessionToken',
    'CartItem',
    'Order', 'OrderLineItem',
]
