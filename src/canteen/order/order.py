"""Order aggregate: the core of the canteen domain.

An Order is a price snapshot of one student's cart at one shop, plus the
status a shopkeeper moves it through while preparing it.

State Machine (7 states):
    PENDING → ACCEPTED → PREPARING → READY → DELIVERED
    PENDING → REJECTED
    PENDING/ACCEPTED → CANCELLED (by the student)

REJECTED, DELIVERED and CANCELLED are terminal.
"""

import threading
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from canteen.domain import canteen
from canteen.order.events import (
    OrderAccepted,
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderPreparationStarted,
    OrderReady,
    OrderRejected,
)
from canteen.shared.actor import Actor, ActorRole
from canteen.shared.errors import Forbidden, InvalidTransition, OrderNotCancellable


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH = "cash"


# (from, to) → the role allowed to make that move
_TRANSITIONS = {
    (OrderStatus.PENDING, OrderStatus.ACCEPTED): ActorRole.SHOP,
    (OrderStatus.PENDING, OrderStatus.REJECTED): ActorRole.SHOP,
    (OrderStatus.PENDING, OrderStatus.CANCELLED): ActorRole.STUDENT,
    (OrderStatus.ACCEPTED, OrderStatus.PREPARING): ActorRole.SHOP,
    (OrderStatus.ACCEPTED, OrderStatus.CANCELLED): ActorRole.STUDENT,
    (OrderStatus.PREPARING, OrderStatus.READY): ActorRole.SHOP,
    (OrderStatus.READY, OrderStatus.DELIVERED): ActorRole.SHOP,
}

TERMINAL_STATES = frozenset({OrderStatus.REJECTED, OrderStatus.DELIVERED, OrderStatus.CANCELLED})

CANCELLABLE_STATES = frozenset(src for (src, dst) in _TRANSITIONS if dst == OrderStatus.CANCELLED)


def allowed_targets(status):
    """Statuses reachable from ``status`` in one step."""
    current = OrderStatus(status)
    return {dst for (src, dst) in _TRANSITIONS if src == current}


# ---------------------------------------------------------------------------
# Creation clock
# ---------------------------------------------------------------------------
_clock_lock = threading.Lock()
_last_created_at = None


def _next_created_at():
    """Wall-clock time, nudged forward so that no two orders share a timestamp."""
    global _last_created_at

    with _clock_lock:
        now = datetime.now(UTC)
        if _last_created_at is not None and now <= _last_created_at:
            now = _last_created_at + timedelta(microseconds=1)
        _last_created_at = now
        return now


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@canteen.value_object(part_of="Order")
class OrderPricing:
    """Financial summary of an order, locked at placement.

    The total is always the subtotal plus the delivery fee.
    """

    subtotal = Float(required=True, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)

    @invariant.post
    def total_is_subtotal_plus_delivery_fee(self):
        if round(self.subtotal + (self.delivery_fee or 0.0), 2) != round(self.total, 2):
            raise ValidationError({"total": ["Total must equal subtotal plus delivery fee"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@canteen.entity(part_of="Order")
class OrderLine:
    """One menu item and quantity, with the name and unit price captured at placement."""

    menu_item_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round(self.unit_price * self.quantity, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@canteen.aggregate
class Order:
    student_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    shop_name = String(max_length=100)
    lines = HasMany(OrderLine)
    pricing = ValueObject(OrderPricing, required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH.value)
    delivery_instructions = String(max_length=200)
    rejection_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rejection_reason_only_on_rejected_orders(self):
        if self.rejection_reason and self.status != OrderStatus.REJECTED.value:
            raise ValidationError({"rejection_reason": ["Only rejected orders carry a rejection reason"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, student_id, shop_id, lines_data, pricing, delivery_instructions=None, shop_name=None):
        """Create a new pending order.

        Args:
            student_id: The student placing the order.
            shop_id: The one shop every line belongs to.
            lines_data: List of dicts with menu_item_id, name, quantity, unit_price.
            pricing: OrderPricing computed for these lines.
            delivery_instructions: Optional free text, at most 200 characters.
            shop_name: Shop name at placement, kept for display.
        """
        now = _next_created_at()

        order = cls(
            student_id=student_id,
            shop_id=shop_id,
            shop_name=shop_name,
            lines=[OrderLine(**line) for line in lines_data],
            pricing=pricing,
            status=OrderStatus.PENDING.value,
            delivery_instructions=delivery_instructions or None,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                student_id=str(student_id),
                shop_id=str(shop_id),
                item_count=sum(line.quantity for line in order.lines),
                subtotal=pricing.subtotal,
                delivery_fee=pricing.delivery_fee,
                total=pricing.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------
    def is_visible_to(self, actor: Actor) -> bool:
        """True when ``actor`` is this order's student or this order's shop."""
        if actor.role == ActorRole.STUDENT:
            return str(self.student_id) == str(actor.id)
        if actor.role == ActorRole.SHOP:
            return str(self.shop_id) == str(actor.id)
        return False

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATES

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _required_role(self, target_status):
        """Role that may move this order to ``target_status``, if the move is legal at all."""
        current = OrderStatus(self.status)
        if target_status not in allowed_targets(current):
            if target_status == OrderStatus.CANCELLED:
                raise OrderNotCancellable(current.value)
            raise InvalidTransition(current.value, target_status.value)
        return _TRANSITIONS[(current, target_status)]

    def _move_to(self, target_status):
        self._required_role(target_status)
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        return now

    def transition(self, target_status, actor: Actor, rejection_reason=None):
        """Move to ``target_status`` on behalf of ``actor``.

        Legality is checked first, then the role the move requires, then
        that the actor is the party of that role on this order.
        """
        try:
            target = OrderStatus(target_status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown order status: {target_status}"]}) from exc

        required_role = self._required_role(target)
        if actor.role != required_role:
            raise Forbidden(
                f"Only the {required_role.value} may move an order to {target.value}",
                required_role=required_role.value,
            )
        if not self.is_visible_to(actor):
            raise Forbidden(
                f"Order {self.id} does not belong to this {actor.role.value}",
                required_role=required_role.value,
            )

        if target == OrderStatus.ACCEPTED:
            self.accept()
        elif target == OrderStatus.REJECTED:
            self.reject(rejection_reason)
        elif target == OrderStatus.PREPARING:
            self.start_preparing()
        elif target == OrderStatus.READY:
            self.mark_ready()
        elif target == OrderStatus.DELIVERED:
            self.mark_delivered()
        elif target == OrderStatus.CANCELLED:
            self.cancel()

    # -------------------------------------------------------------------
    # Shop-driven lifecycle
    # -------------------------------------------------------------------
    def accept(self):
        now = self._move_to(OrderStatus.ACCEPTED)
        self.raise_(OrderAccepted(order_id=str(self.id), shop_id=str(self.shop_id), accepted_at=now))

    def reject(self, reason=None):
        """Reject a pending order. The reason, when given, is kept on the order."""
        self._required_role(OrderStatus.REJECTED)
        now = datetime.now(UTC)
        self.status = OrderStatus.REJECTED.value
        self.rejection_reason = reason or None
        self.updated_at = now
        self.raise_(
            OrderRejected(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                reason=reason or None,
                rejected_at=now,
            )
        )

    def start_preparing(self):
        now = self._move_to(OrderStatus.PREPARING)
        self.raise_(OrderPreparationStarted(order_id=str(self.id), started_at=now))

    def mark_ready(self):
        now = self._move_to(OrderStatus.READY)
        self.raise_(OrderReady(order_id=str(self.id), ready_at=now))

    def mark_delivered(self):
        now = self._move_to(OrderStatus.DELIVERED)
        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    # -------------------------------------------------------------------
    # Student-driven
    # -------------------------------------------------------------------
    def cancel(self):
        """Cancel the order. Only allowed while pending or accepted."""
        previous = self.status
        now = self._move_to(OrderStatus.CANCELLED)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                student_id=str(self.student_id),
                previous_status=previous,
                cancelled_at=now,
            )
        )
