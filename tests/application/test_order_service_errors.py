"""Tests for how the order service surfaces failures and serialises writes."""

import threading

import pytest
from canteen.order.service import OrderLocks, OrderService
from canteen.shared.actor import Actor
from canteen.shared.errors import EmptyOrder, InternalError


class _BrokenDomain:
    def __init__(self, exc):
        self.exc = exc

    def process(self, command, asynchronous=True):
        raise self.exc

    def repository_for(self, aggregate_cls):
        raise AssertionError("repository should not be reached")


class TestFailureMapping:
    def test_unexpected_failure_becomes_internal_error(self):
        service = OrderService(_BrokenDomain(RuntimeError("store unavailable")), locks=OrderLocks())

        with pytest.raises(InternalError) as exc:
            service.place_order(Actor.student("stu-001"), "shop-001", [{"menu_item_id": "x", "quantity": 1}])
        assert isinstance(exc.value.__cause__, RuntimeError)
        assert "_internal" in exc.value.messages

    def test_business_errors_pass_through(self):
        service = OrderService(_BrokenDomain(EmptyOrder()), locks=OrderLocks())

        with pytest.raises(EmptyOrder):
            service.cancel_order(Actor.student("stu-001"), "ord-001")

    def test_internal_error_inside_transition(self):
        service = OrderService(_BrokenDomain(OSError("disk full")), locks=OrderLocks())

        with pytest.raises(InternalError):
            service.transition_status(Actor.shop("shop-001"), "ord-001", "accepted")


class TestOrderLocks:
    def test_same_order_is_exclusive(self):
        locks = OrderLocks()
        entered = threading.Event()
        release = threading.Event()
        second_entered = threading.Event()

        def first():
            with locks.hold("ord-001"):
                entered.set()
                release.wait(timeout=5)

        def second():
            with locks.hold("ord-001"):
                second_entered.set()

        t1 = threading.Thread(target=first)
        t1.start()
        assert entered.wait(timeout=5)

        t2 = threading.Thread(target=second)
        t2.start()
        assert not second_entered.wait(timeout=0.2)

        release.set()
        t1.join(timeout=5)
        t2.join(timeout=5)
        assert second_entered.is_set()

    def test_different_orders_do_not_block(self):
        locks = OrderLocks()
        with locks.hold("ord-001"):
            done = threading.Event()

            def other():
                with locks.hold("ord-002"):
                    done.set()

            thread = threading.Thread(target=other)
            thread.start()
            assert done.wait(timeout=5)
            thread.join(timeout=5)

    def test_released_locks_are_dropped(self):
        locks = OrderLocks()
        for i in range(1000):
            with locks.hold(f"ord-{i}"):
                assert f"ord-{i}" in locks._locks
        assert locks._locks == {}

    def test_lock_kept_while_another_thread_waits(self):
        locks = OrderLocks()
        waiting = threading.Event()
        done = threading.Event()

        def waiter():
            waiting.set()
            with locks.hold("ord-001"):
                done.set()

        with locks.hold("ord-001"):
            thread = threading.Thread(target=waiter)
            thread.start()
            assert waiting.wait(timeout=5)
            assert not done.wait(timeout=0.2)

        thread.join(timeout=5)
        assert done.is_set()
        assert locks._locks == {}

    def test_lock_released_when_body_raises(self):
        locks = OrderLocks()
        with pytest.raises(RuntimeError):
            with locks.hold("ord-001"):
                raise RuntimeError("boom")
        assert locks._locks == {}
