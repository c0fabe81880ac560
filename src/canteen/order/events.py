"""Domain events for the Order aggregate.

One event per lifecycle step. Events are immutable facts; the order itself
holds current state.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from canteen.domain import canteen


@canteen.event(part_of="Order")
class OrderPlaced:
    """A student placed an order; prices and fee are now fixed."""

    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    delivery_fee = Float(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@canteen.event(part_of="Order")
class OrderAccepted:
    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    accepted_at = DateTime(required=True)


@canteen.event(part_of="Order")
class OrderRejected:
    """The shop declined a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    reason = String(max_length=500)
    rejected_at = DateTime(required=True)


@canteen.event(part_of="Order")
class OrderPreparationStarted:
    __version__ = 1

    order_id = Identifier(required=True)
    started_at = DateTime(required=True)


@canteen.event(part_of="Order")
class OrderReady:
    """Food is ready for pickup or hand-over to delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    ready_at = DateTime(required=True)


@canteen.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@canteen.event(part_of="Order")
class OrderCancelled:
    """The student withdrew the order before preparation began."""

    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
