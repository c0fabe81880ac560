"""Order service: the single entry point for order writes and actor-scoped reads.

Writes go through the domain's command handlers, so each one runs in its own
unit of work. Status changes on one order are serialised by a per-order lock
held until that unit of work has committed: two racing transitions from the
same prior state cannot both succeed.
"""

import json
import threading
from contextlib import contextmanager
from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from canteen.order.cancellation import CancelOrder
from canteen.order.order import Order, OrderStatus
from canteen.order.placement import PlaceOrder, load_shop, meets_minimum, parse_lines, price_lines
from canteen.order.status import UpdateOrderStatus
from canteen.shared.actor import Actor, ActorRole
from canteen.shared.errors import Forbidden, InternalError, NotFound

logger = structlog.get_logger(__name__)


class OrderLocks:
    """One lock per order id, kept only while someone holds or waits for it."""

    def __init__(self):
        self._guard = threading.Lock()
        # order id -> [lock, number of holders and waiters]
        self._locks = {}

    @contextmanager
    def hold(self, order_id):
        key = str(order_id)
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


_default_locks = OrderLocks()


@dataclass(frozen=True)
class Quote:
    """Pricing preview for a cart that has not been placed."""

    shop_id: str
    subtotal: float
    delivery_fee: float
    total: float
    minimum_order_amount: float
    meets_minimum: bool


class OrderService:
    def __init__(self, domain, locks: OrderLocks | None = None):
        self.domain = domain
        self.locks = locks or _default_locks

    @property
    def orders(self):
        return self.domain.repository_for(Order)

    def _process(self, command):
        try:
            return self.domain.process(command, asynchronous=False)
        except (ValidationError, ObjectNotFoundError, Forbidden):
            raise
        except Exception as exc:
            logger.exception("Order command failed", command=type(command).__name__)
            raise InternalError(f"{type(command).__name__} could not be completed") from exc

    @staticmethod
    def _require_student(actor: Actor, action):
        if actor.role != ActorRole.STUDENT:
            raise Forbidden(f"Only students may {action}", required_role=ActorRole.STUDENT.value)

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def place_order(self, student: Actor, shop_id, lines, delivery_instructions=None) -> Order:
        """Place a pending order for ``lines`` (``[{"menu_item_id", "quantity"}]``) at one shop."""
        self._require_student(student, "place orders")

        order_id = self._process(
            PlaceOrder(
                student_id=student.id,
                shop_id=str(shop_id),
                lines=json.dumps(lines),
                delivery_instructions=delivery_instructions,
            )
        )
        return self.orders.get(order_id)

    def transition_status(self, actor: Actor, order_id, target_status, rejection_reason=None) -> Order:
        target = target_status.value if isinstance(target_status, OrderStatus) else target_status
        with self.locks.hold(order_id):
            self._process(
                UpdateOrderStatus(
                    order_id=str(order_id),
                    actor_id=actor.id,
                    actor_role=actor.role.value,
                    status=target,
                    rejection_reason=rejection_reason,
                )
            )
            return self.orders.get(order_id)

    def cancel_order(self, student: Actor, order_id) -> Order:
        self._require_student(student, "cancel orders")
        with self.locks.hold(order_id):
            self._process(CancelOrder(order_id=str(order_id), student_id=student.id))
            return self.orders.get(order_id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_order(self, actor: Actor, order_id) -> Order:
        try:
            order = self.orders.get(order_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Order", order_id) from exc

        if not order.is_visible_to(actor):
            raise Forbidden(f"Order {order_id} belongs to another account")
        return order

    def list_orders(self, actor: Actor) -> list[Order]:
        return self.orders.find_for_actor(actor)

    def quote(self, shop_id, lines) -> Quote:
        """Price ``lines`` as placement would, without admitting or persisting anything."""
        shop = load_shop(shop_id)
        _, pricing = price_lines(shop, parse_lines(lines))
        return Quote(
            shop_id=str(shop.id),
            subtotal=pricing.subtotal,
            delivery_fee=pricing.delivery_fee,
            total=pricing.total,
            minimum_order_amount=shop.policy.minimum_order_amount or 0.0,
            meets_minimum=meets_minimum(shop, pricing),
        )
