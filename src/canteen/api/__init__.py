"""Canteen domain API package."""

from canteen.api.errors import register_exception_handlers
from canteen.api.routes import order_router, shop_router, student_router

__all__ = ["order_router", "register_exception_handlers", "shop_router", "student_router"]
