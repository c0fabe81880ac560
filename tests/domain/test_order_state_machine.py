"""Tests for the Order state machine: legal moves, roles, ownership and terminal states."""

import pytest
from canteen.order.events import (
    OrderAccepted,
    OrderCancelled,
    OrderDelivered,
    OrderPreparationStarted,
    OrderReady,
    OrderRejected,
)
from canteen.order.order import (
    CANCELLABLE_STATES,
    TERMINAL_STATES,
    Order,
    OrderPricing,
    OrderStatus,
    allowed_targets,
)
from canteen.shared.actor import Actor
from canteen.shared.errors import Forbidden, InvalidTransition, OrderNotCancellable
from protean.exceptions import ValidationError

STUDENT = Actor.student("stu-001")
SHOP = Actor.shop("shop-001")

_PATH = {
    OrderStatus.ACCEPTED: [(OrderStatus.ACCEPTED, SHOP)],
    OrderStatus.REJECTED: [(OrderStatus.REJECTED, SHOP)],
    OrderStatus.PREPARING: [(OrderStatus.ACCEPTED, SHOP), (OrderStatus.PREPARING, SHOP)],
    OrderStatus.READY: [
        (OrderStatus.ACCEPTED, SHOP),
        (OrderStatus.PREPARING, SHOP),
        (OrderStatus.READY, SHOP),
    ],
    OrderStatus.DELIVERED: [
        (OrderStatus.ACCEPTED, SHOP),
        (OrderStatus.PREPARING, SHOP),
        (OrderStatus.READY, SHOP),
        (OrderStatus.DELIVERED, SHOP),
    ],
    OrderStatus.CANCELLED: [(OrderStatus.CANCELLED, STUDENT)],
}


def _make_order():
    return Order.place(
        student_id=STUDENT.id,
        shop_id=SHOP.id,
        lines_data=[{"menu_item_id": "item-001", "name": "Masala Dosa", "quantity": 1, "unit_price": 70.0}],
        pricing=OrderPricing(subtotal=70.0, delivery_fee=0.0, total=70.0),
    )


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = _make_order()
    for status, actor in _PATH.get(target_status, []):
        order.transition(status, actor)
    order._events.clear()
    return order


class TestTransitionTable:
    def test_terminal_states(self):
        assert TERMINAL_STATES == {OrderStatus.REJECTED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}

    def test_cancellable_states(self):
        assert CANCELLABLE_STATES == {OrderStatus.PENDING, OrderStatus.ACCEPTED}

    def test_pending_targets(self):
        assert allowed_targets("pending") == {
            OrderStatus.ACCEPTED,
            OrderStatus.REJECTED,
            OrderStatus.CANCELLED,
        }

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATES, key=lambda s: s.value))
    def test_terminal_states_have_no_targets(self, status):
        assert allowed_targets(status.value) == set()


class TestShopDrivenLifecycle:
    def test_full_happy_path(self):
        order = _make_order()
        order._events.clear()

        order.transition("accepted", SHOP)
        order.transition("preparing", SHOP)
        order.transition("ready", SHOP)
        order.transition("delivered", SHOP)

        assert order.status == OrderStatus.DELIVERED.value
        assert [type(e) for e in order._events] == [
            OrderAccepted,
            OrderPreparationStarted,
            OrderReady,
            OrderDelivered,
        ]
        assert order.is_terminal

    def test_accepts_enum_targets(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.transition(OrderStatus.ACCEPTED, SHOP)
        assert order.status == OrderStatus.ACCEPTED.value

    def test_transition_bumps_updated_at(self):
        order = _order_at_state(OrderStatus.PENDING)
        before = order.updated_at
        order.transition("accepted", SHOP)
        assert order.updated_at >= before

    def test_reject_keeps_reason(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.transition("rejected", SHOP, rejection_reason="Kitchen closed")

        assert order.status == OrderStatus.REJECTED.value
        assert order.rejection_reason == "Kitchen closed"
        event = order._events[-1]
        assert isinstance(event, OrderRejected)
        assert event.reason == "Kitchen closed"

    def test_reject_without_reason(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.transition("rejected", SHOP)
        assert order.status == OrderStatus.REJECTED.value
        assert order.rejection_reason is None

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, "preparing"),
            (OrderStatus.PENDING, "ready"),
            (OrderStatus.PENDING, "delivered"),
            (OrderStatus.ACCEPTED, "ready"),
            (OrderStatus.ACCEPTED, "rejected"),
            (OrderStatus.PREPARING, "accepted"),
            (OrderStatus.READY, "preparing"),
        ],
    )
    def test_illegal_moves(self, current, target):
        order = _order_at_state(current)
        with pytest.raises(InvalidTransition) as exc:
            order.transition(target, SHOP)
        assert exc.value.current_status == current.value
        assert exc.value.requested_status == target
        assert order.status == current.value

    @pytest.mark.parametrize("terminal", [OrderStatus.REJECTED, OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    @pytest.mark.parametrize("target", ["accepted", "preparing", "ready", "delivered", "rejected"])
    def test_terminal_states_are_final(self, terminal, target):
        order = _order_at_state(terminal)
        with pytest.raises(InvalidTransition):
            order.transition(target, SHOP)
        assert order.status == terminal.value

    @pytest.mark.parametrize("current", list(OrderStatus))
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_moves_match_allowed_targets(self, current, target):
        order = _order_at_state(current)
        actor = STUDENT if target == OrderStatus.CANCELLED else SHOP

        if target in allowed_targets(current):
            order.transition(target, actor)
            assert order.status == target.value
            assert order.is_terminal == (target in TERMINAL_STATES)
        else:
            with pytest.raises(InvalidTransition):
                order.transition(target, actor)
            assert order.status == current.value

    def test_unknown_status(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(ValidationError) as exc:
            order.transition("shipped", SHOP)
        assert not isinstance(exc.value, InvalidTransition)
        assert "status" in exc.value.messages


class TestRolesAndOwnership:
    def test_student_cannot_accept(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(Forbidden) as exc:
            order.transition("accepted", STUDENT)
        assert exc.value.required_role == "shop"
        assert order.status == OrderStatus.PENDING.value

    def test_shop_cannot_cancel(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(Forbidden) as exc:
            order.transition("cancelled", SHOP)
        assert exc.value.required_role == "student"

    def test_other_shop_cannot_accept(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(Forbidden):
            order.transition("accepted", Actor.shop("shop-999"))

    def test_other_student_cannot_cancel(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(Forbidden):
            order.transition("cancelled", Actor.student("stu-999"))

    def test_legality_checked_before_role(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(InvalidTransition):
            order.transition("accepted", STUDENT)

    def test_visibility(self):
        order = _make_order()
        assert order.is_visible_to(STUDENT)
        assert order.is_visible_to(SHOP)
        assert not order.is_visible_to(Actor.student("stu-999"))
        assert not order.is_visible_to(Actor.shop("shop-999"))
        assert not order.is_visible_to(Actor.shop(STUDENT.id))


class TestCancellation:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.ACCEPTED])
    def test_student_cancels_from_cancellable_states(self, status):
        order = _order_at_state(status)
        order.transition("cancelled", STUDENT)

        assert order.status == OrderStatus.CANCELLED.value
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == status.value

    @pytest.mark.parametrize(
        "status",
        [
            OrderStatus.PREPARING,
            OrderStatus.READY,
            OrderStatus.DELIVERED,
            OrderStatus.REJECTED,
            OrderStatus.CANCELLED,
        ],
    )
    def test_cannot_cancel_after_preparation_starts(self, status):
        order = _order_at_state(status)
        with pytest.raises(OrderNotCancellable) as exc:
            order.transition("cancelled", STUDENT)
        assert exc.value.current_status == status.value
        assert exc.value.requested_status == "cancelled"
        assert order.status == status.value

    def test_not_cancellable_is_an_invalid_transition(self):
        assert issubclass(OrderNotCancellable, InvalidTransition)
