"""Error taxonomy for the canteen domain.

Business-rule rejections extend Protean's ``ValidationError`` so they carry a
``messages`` dict keyed by the offending field, the same shape raised by field
validation. Lookups that miss extend ``ObjectNotFoundError``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class EmptyOrder(ValidationError):
    def __init__(self):
        super().__init__({"lines": ["An order must contain at least one item"]})


class InvalidLineItem(ValidationError):
    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__({field: [f"Line {field} cannot be negative, got {value}"]})


class ItemUnavailable(ValidationError):
    def __init__(self, menu_item_id, name=None):
        self.menu_item_id = str(menu_item_id)
        label = name or "Unknown"
        super().__init__({"menu_item_id": [f"Item {label} ({self.menu_item_id}) is not available"]})


class CrossShopOrder(ValidationError):
    def __init__(self, menu_item_id, shop_id):
        self.menu_item_id = str(menu_item_id)
        self.shop_id = str(shop_id)
        super().__init__({"menu_item_id": [f"Item {self.menu_item_id} does not belong to shop {self.shop_id}"]})


class BelowMinimumOrder(ValidationError):
    def __init__(self, subtotal, minimum_order_amount):
        self.subtotal = subtotal
        self.minimum_order_amount = minimum_order_amount
        super().__init__(
            {"subtotal": [f"Minimum order amount is {minimum_order_amount:.2f}, cart subtotal is {subtotal:.2f}"]}
        )


class ShopClosed(ValidationError):
    def __init__(self, shop_id):
        self.shop_id = str(shop_id)
        super().__init__({"shop_id": [f"Shop {self.shop_id} is not accepting orders"]})


class InvalidTransition(ValidationError):
    def __init__(self, current_status, requested_status, messages=None):
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            messages or {"status": [f"Cannot transition from {current_status} to {requested_status}"]}
        )


class OrderNotCancellable(InvalidTransition):
    def __init__(self, current_status):
        super().__init__(
            current_status,
            "cancelled",
            messages={
                "status": [
                    f"Cannot cancel order in {current_status} state. "
                    f"Cancellation is only allowed from: pending, accepted"
                ]
            },
        )


class NotFound(ObjectNotFoundError):
    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = str(identifier)
        super().__init__({"_entity": [f"{entity} {self.identifier} not found"]})


class Forbidden(Exception):
    """The acting principal lacks the role or ownership the operation needs."""

    def __init__(self, message, required_role=None):
        self.required_role = required_role
        self.messages = {"_actor": [message]}
        super().__init__(message)


class InternalError(Exception):
    """An unexpected failure below the domain, e.g. in persistence."""

    def __init__(self, message="Internal error"):
        self.messages = {"_internal": [message]}
        super().__init__(message)
