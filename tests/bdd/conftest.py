"""Shared BDD fixtures and step definitions for the order lifecycle."""

import pytest
from canteen.order.service import OrderLocks, OrderService
from canteen.shared.actor import Actor
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


@pytest.fixture()
def service():
    return OrderService(current_domain, locks=OrderLocks())


@pytest.fixture()
def context():
    """Mutable scenario state: actors, menu, current order and any refusal."""
    return {"menu": {}, "order_id": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        "a shop charging {fee:f} for delivery below {threshold:f} with a minimum order of {minimum:f}"
    )
)
def _(context, make_shop, fee, threshold, minimum):
    shop_id = make_shop(delivery_fee=fee, minimum_order_amount=minimum, free_delivery_above=threshold)
    context["shop"] = Actor.shop(shop_id)


@given(parsers.cfparse('the shop sells "{name}" for {price:f}'))
def _(context, make_item, name, price):
    context["menu"][name] = make_item(context["shop"].id, price, name=name)


@given("a registered student")
def _(context, make_student):
    context["student"] = Actor.student(make_student())


@given(parsers.cfparse('the student has ordered {quantity:d} "{name}"'))
def _(context, service, quantity, name):
    order = service.place_order(
        context["student"],
        context["shop"].id,
        [{"menu_item_id": context["menu"][name], "quantity": quantity}],
    )
    context["order_id"] = order.id


@given(parsers.cfparse('the shop has moved the order to "{status}"'))
def _(context, service, status):
    service.transition_status(context["shop"], context["order_id"], status)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(context, service, status):
    order = service.get_order(context["student"], context["order_id"])
    assert order.status == status


@then(parsers.cfparse("the order total is {total:f} with a delivery fee of {fee:f}"))
def _(context, service, total, fee):
    order = service.get_order(context["student"], context["order_id"])
    assert order.pricing.total == total
    assert order.pricing.delivery_fee == fee


@then(parsers.cfparse('the request is refused with "{error}"'))
def _(context, error):
    assert isinstance(context["error"], ValidationError)
    assert type(context["error"]).__name__ == error
