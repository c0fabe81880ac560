import pytest
from canteen.api import order_router, register_exception_handlers, shop_router, student_router
from canteen.domain import CAMPUS_EMAIL_DOMAIN, canteen
from canteen.utils.logging import bind_request_context, clear_request_context
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        bind_request_context(path=request.url.path, actor_id=request.headers.get("x-actor-id"))
        try:
            with canteen.domain_context():
                return await call_next(request)
        finally:
            clear_request_context()

    app.include_router(student_router)
    app.include_router(shop_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


def as_student(student_id):
    return {"X-Actor-Id": student_id, "X-Actor-Role": "student"}


def as_shop(shop_id):
    return {"X-Actor-Id": shop_id, "X-Actor-Role": "shop"}


@pytest.fixture()
def register_shop(client):
    counter = {"n": 0}

    def _register_shop(**overrides):
        counter["n"] += 1
        n = counter["n"]
        body = {
            "owner_name": f"Owner {n}",
            "email": f"owner{n}@example.com",
            "phone": "9123456780",
            "shop_name": f"Canteen {n}",
            "location": "Hostel Area",
            "shop_type": "Fast Food",
            "delivery_fee": 20.0,
            "minimum_order_amount": 50.0,
            "free_delivery_above": 200.0,
        }
        body.update(overrides)
        response = client.post("/shops", json=body)
        assert response.status_code == 201, response.text
        return response.json()["shop_id"]

    return _register_shop


@pytest.fixture()
def register_student(client):
    counter = {"n": 0}

    def _register_student(**overrides):
        counter["n"] += 1
        n = counter["n"]
        body = {
            "name": f"Student {n}",
            "email": f"student{n}@{CAMPUS_EMAIL_DOMAIN}",
            "roll_number": f"{102200000 + n}",
            "hostel": "J",
            "phone": "9876543210",
            "year": 2,
        }
        body.update(overrides)
        response = client.post("/students", json=body)
        assert response.status_code == 201, response.text
        return response.json()["student_id"]

    return _register_student


@pytest.fixture()
def add_item(client):
    def _add_item(shop_id, price, name="Veg Thali", category="Main Course", is_available=True):
        response = client.post(
            "/shops/me/menu",
            json={
                "name": name,
                "description": f"{name}, made fresh",
                "price": price,
                "category": category,
                "is_veg": True,
                "is_available": is_available,
                "preparation_time": 15,
            },
            headers=as_shop(shop_id),
        )
        assert response.status_code == 201, response.text
        return response.json()["menu_item_id"]

    return _add_item
