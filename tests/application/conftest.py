import pytest
from canteen.order.service import OrderLocks, OrderService
from canteen.shared.actor import Actor
from protean import current_domain


@pytest.fixture
def service():
    return OrderService(current_domain, locks=OrderLocks())


@pytest.fixture
def shop_id(make_shop):
    """Charges 20 below 200, refuses carts under 50."""
    return make_shop(delivery_fee=20.0, minimum_order_amount=50.0, free_delivery_above=200.0)


@pytest.fixture
def shop(shop_id):
    return Actor.shop(shop_id)


@pytest.fixture
def student(make_student):
    return Actor.student(make_student())


@pytest.fixture
def thali_id(shop_id, make_item):
    return make_item(shop_id, 100.0, name="Veg Thali")


@pytest.fixture
def lassi_id(shop_id, make_item):
    return make_item(shop_id, 50.0, name="Lassi", category="Beverages")


@pytest.fixture
def place(service, student, shop_id, thali_id):
    """Place an order for ``quantity`` thalis."""

    def _place(quantity=1, actor=None):
        return service.place_order(
            actor or student,
            shop_id,
            [{"menu_item_id": thali_id, "quantity": quantity}],
        )

    return _place
