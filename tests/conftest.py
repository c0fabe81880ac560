import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def canteen_bed():
    from canteen.domain import canteen

    bed = DomainFixture(canteen)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(canteen_bed):
    with canteen_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Clear every store after each test."""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Builders shared by application, integration and BDD tests
# ---------------------------------------------------------------------------
@pytest.fixture
def make_shop():
    from protean import current_domain

    from canteen.shop.registration import RegisterShop

    counter = {"n": 0}

    def _make_shop(delivery_fee=0.0, minimum_order_amount=0.0, free_delivery_above=None, **overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "owner_name": f"Owner {n}",
            "email": f"owner{n}@example.com",
            "phone": "9123456780",
            "shop_name": f"Shop {n}",
            "location": "Food Court",
            "shop_type": "Fast Food",
            "delivery_fee": delivery_fee,
            "minimum_order_amount": minimum_order_amount,
            "free_delivery_above": free_delivery_above,
        }
        fields.update(overrides)
        return current_domain.process(RegisterShop(**fields), asynchronous=False)

    return _make_shop


@pytest.fixture
def make_student():
    from protean import current_domain

    from canteen.domain import CAMPUS_EMAIL_DOMAIN
    from canteen.student.registration import RegisterStudent

    counter = {"n": 0}

    def _make_student(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "name": f"Student {n}",
            "email": f"student{n}@{CAMPUS_EMAIL_DOMAIN}",
            "roll_number": f"{102100000 + n}",
            "hostel": "J",
            "phone": "9876543210",
            "year": 2,
        }
        fields.update(overrides)
        return current_domain.process(RegisterStudent(**fields), asynchronous=False)

    return _make_student


@pytest.fixture
def make_item():
    from protean import current_domain

    from canteen.menu.management import AddMenuItem

    def _make_item(shop_id, price, name="Veg Thali", is_available=True, category="Main Course"):
        return current_domain.process(
            AddMenuItem(
                shop_id=shop_id,
                name=name,
                description=f"{name} from the canteen",
                price=price,
                category=category,
                is_veg=True,
                is_available=is_available,
                preparation_time=15,
            ),
            asynchronous=False,
        )

    return _make_item
