"""FastAPI routes for the canteen domain: students, shops, menus and orders.

Thin adapters that translate HTTP requests into domain commands or
OrderService calls. No business logic lives here.
"""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from canteen.api.auth import current_actor, current_shop, current_student
from canteen.api.schemas import (
    AddMenuItemRequest,
    DeliveryPolicyRequest,
    DeliveryPolicySchema,
    MenuItemIdResponse,
    MenuItemResponse,
    OrderLineResponse,
    OrderResponse,
    PlaceOrderRequest,
    QuoteRequest,
    QuoteResponse,
    RegisterShopRequest,
    RegisterStudentRequest,
    ShopIdResponse,
    ShopResponse,
    StatusResponse,
    StudentContactSchema,
    StudentIdResponse,
    StudentResponse,
    UpdateMenuItemRequest,
    UpdateOrderStatusRequest,
    UpdateShopProfileRequest,
    UpdateStudentProfileRequest,
)
from canteen.menu.management import AddMenuItem, RemoveMenuItem, UpdateMenuItem
from canteen.menu.menu_item import MenuItem
from canteen.order.service import OrderService
from canteen.shared.actor import Actor
from canteen.shop.profile import ChangeDeliveryPolicy, UpdateShopProfile
from canteen.shop.registration import RegisterShop
from canteen.shop.shop import Shop
from canteen.student.profile import UpdateStudentProfile
from canteen.student.registration import RegisterStudent
from canteen.student.student import Student


def get_order_service() -> OrderService:
    return OrderService(current_domain)


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------
def _student_response(student) -> StudentResponse:
    return StudentResponse(
        student_id=str(student.id),
        name=student.name,
        email=student.email.address,
        roll_number=student.roll_number,
        hostel=student.hostel,
        phone=student.phone.number,
        year=student.year,
    )


def _shop_response(shop) -> ShopResponse:
    policy = shop.policy
    return ShopResponse(
        shop_id=str(shop.id),
        owner_name=shop.owner_name,
        shop_name=shop.shop_name,
        email=shop.email.address,
        phone=shop.phone.number,
        location=shop.location,
        shop_type=shop.shop_type,
        is_active=bool(shop.is_active),
        is_verified=bool(shop.is_verified),
        is_open=bool(shop.is_open),
        delivery_policy=DeliveryPolicySchema(
            delivery_fee=policy.delivery_fee or 0.0,
            minimum_order_amount=policy.minimum_order_amount or 0.0,
            free_delivery_above=policy.free_delivery_above,
        ),
    )


def _menu_item_response(item) -> MenuItemResponse:
    return MenuItemResponse(
        menu_item_id=str(item.id),
        shop_id=str(item.shop_id),
        name=item.name,
        description=item.description,
        price=item.price,
        category=item.category,
        is_veg=bool(item.is_veg),
        is_available=bool(item.is_available),
        preparation_time=item.preparation_time,
    )


def _student_contact(student_id) -> StudentContactSchema | None:
    student = current_domain.repository_for(Student).find_by_id(student_id)
    if student is None:
        return None
    return StudentContactSchema(
        name=student.name,
        roll_number=student.roll_number,
        hostel=student.hostel,
        phone=student.phone.number,
    )


def _order_response(order) -> OrderResponse:
    # Contact details are read live so hostel or phone changes reach open orders
    shop = current_domain.repository_for(Shop).find_by_id(order.shop_id)
    return OrderResponse(
        order_id=str(order.id),
        student_id=str(order.student_id),
        student=_student_contact(order.student_id),
        shop_id=str(order.shop_id),
        shop_name=order.shop_name,
        shop_location=shop.location if shop else None,
        lines=[
            OrderLineResponse(
                menu_item_id=str(line.menu_item_id),
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in order.lines
        ],
        subtotal=order.pricing.subtotal,
        delivery_fee=order.pricing.delivery_fee,
        total=order.pricing.total,
        status=order.status,
        is_terminal=order.is_terminal,
        payment_method=order.payment_method,
        delivery_instructions=order.delivery_instructions,
        rejection_reason=order.rejection_reason,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# ---------------------------------------------------------------------------
# Student Router
# ---------------------------------------------------------------------------
student_router = APIRouter(prefix="/students", tags=["students"])


@student_router.post("", status_code=201, response_model=StudentIdResponse)
async def register_student(body: RegisterStudentRequest) -> StudentIdResponse:
    command = RegisterStudent(
        name=body.name,
        email=body.email,
        roll_number=body.roll_number,
        hostel=body.hostel,
        phone=body.phone,
        year=body.year,
    )
    result = current_domain.process(command, asynchronous=False)
    return StudentIdResponse(student_id=result)


@student_router.get("/me", response_model=StudentResponse)
async def get_my_profile(student: Actor = Depends(current_student)) -> StudentResponse:
    return _student_response(current_domain.repository_for(Student).get(student.id))


@student_router.put("/me", response_model=StudentResponse)
async def update_my_profile(
    body: UpdateStudentProfileRequest,
    student: Actor = Depends(current_student),
) -> StudentResponse:
    command = UpdateStudentProfile(
        student_id=student.id,
        name=body.name,
        hostel=body.hostel,
        phone=body.phone,
        year=body.year,
    )
    current_domain.process(command, asynchronous=False)
    return _student_response(current_domain.repository_for(Student).get(student.id))


# ---------------------------------------------------------------------------
# Shop Router
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shops", tags=["shops"])


@shop_router.post("", status_code=201, response_model=ShopIdResponse)
async def register_shop(body: RegisterShopRequest) -> ShopIdResponse:
    command = RegisterShop(
        owner_name=body.owner_name,
        email=body.email,
        phone=body.phone,
        shop_name=body.shop_name,
        location=body.location,
        shop_type=body.shop_type,
        delivery_fee=body.delivery_fee,
        minimum_order_amount=body.minimum_order_amount,
        free_delivery_above=body.free_delivery_above,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShopIdResponse(shop_id=result)


@shop_router.get("", response_model=list[ShopResponse])
async def list_shops() -> list[ShopResponse]:
    """All active shops, alphabetically."""
    return [_shop_response(shop) for shop in current_domain.repository_for(Shop).find_active()]


@shop_router.get("/me", response_model=ShopResponse)
async def get_my_shop(shop: Actor = Depends(current_shop)) -> ShopResponse:
    return _shop_response(current_domain.repository_for(Shop).get(shop.id))


@shop_router.put("/me", response_model=ShopResponse)
async def update_my_shop(body: UpdateShopProfileRequest, shop: Actor = Depends(current_shop)) -> ShopResponse:
    command = UpdateShopProfile(
        shop_id=shop.id,
        owner_name=body.owner_name,
        phone=body.phone,
        shop_name=body.shop_name,
        location=body.location,
        shop_type=body.shop_type,
        is_open=body.is_open,
    )
    current_domain.process(command, asynchronous=False)
    return _shop_response(current_domain.repository_for(Shop).get(shop.id))


@shop_router.put("/me/delivery-policy", response_model=ShopResponse)
async def change_delivery_policy(body: DeliveryPolicyRequest, shop: Actor = Depends(current_shop)) -> ShopResponse:
    clear_threshold = "free_delivery_above" in body.model_fields_set and body.free_delivery_above is None
    command = ChangeDeliveryPolicy(
        shop_id=shop.id,
        delivery_fee=body.delivery_fee,
        minimum_order_amount=body.minimum_order_amount,
        free_delivery_above=body.free_delivery_above,
        clear_free_delivery_above=clear_threshold,
    )
    current_domain.process(command, asynchronous=False)
    return _shop_response(current_domain.repository_for(Shop).get(shop.id))


@shop_router.get("/me/menu", response_model=list[MenuItemResponse])
async def list_my_menu(shop: Actor = Depends(current_shop)) -> list[MenuItemResponse]:
    """Every item of the calling shop, including unavailable ones."""
    items = current_domain.repository_for(MenuItem).find_for_shop(shop.id)
    return [_menu_item_response(item) for item in items]


@shop_router.post("/me/menu", status_code=201, response_model=MenuItemIdResponse)
async def add_menu_item(body: AddMenuItemRequest, shop: Actor = Depends(current_shop)) -> MenuItemIdResponse:
    command = AddMenuItem(
        shop_id=shop.id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        is_veg=body.is_veg,
        is_available=body.is_available,
        preparation_time=body.preparation_time,
    )
    result = current_domain.process(command, asynchronous=False)
    return MenuItemIdResponse(menu_item_id=result)


@shop_router.put("/me/menu/{menu_item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    menu_item_id: str,
    body: UpdateMenuItemRequest,
    shop: Actor = Depends(current_shop),
) -> MenuItemResponse:
    command = UpdateMenuItem(
        shop_id=shop.id,
        menu_item_id=menu_item_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        is_veg=body.is_veg,
        is_available=body.is_available,
        preparation_time=body.preparation_time,
    )
    current_domain.process(command, asynchronous=False)
    return _menu_item_response(current_domain.repository_for(MenuItem).get(menu_item_id))


@shop_router.delete("/me/menu/{menu_item_id}", response_model=StatusResponse)
async def remove_menu_item(menu_item_id: str, shop: Actor = Depends(current_shop)) -> StatusResponse:
    current_domain.process(RemoveMenuItem(shop_id=shop.id, menu_item_id=menu_item_id), asynchronous=False)
    return StatusResponse()


@shop_router.get("/{shop_id}/menu", response_model=list[MenuItemResponse])
async def get_shop_menu(shop_id: str) -> list[MenuItemResponse]:
    """Public menu: available items only."""
    items = current_domain.repository_for(MenuItem).find_available_for_shop(shop_id)
    return [_menu_item_response(item) for item in items]


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    student: Actor = Depends(current_student),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.place_order(
        student,
        shop_id=body.shop_id,
        lines=[line.model_dump() for line in body.lines],
        delivery_instructions=body.delivery_instructions,
    )
    return _order_response(order)


@order_router.post("/quote", response_model=QuoteResponse)
async def quote_order(body: QuoteRequest, service: OrderService = Depends(get_order_service)) -> QuoteResponse:
    quote = service.quote(body.shop_id, [line.model_dump() for line in body.lines])
    return QuoteResponse(
        shop_id=quote.shop_id,
        subtotal=quote.subtotal,
        delivery_fee=quote.delivery_fee,
        total=quote.total,
        minimum_order_amount=quote.minimum_order_amount,
        meets_minimum=quote.meets_minimum,
    )


@order_router.get("", response_model=list[OrderResponse])
async def list_my_orders(
    actor: Actor = Depends(current_actor),
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    return [_order_response(order) for order in service.list_orders(actor)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    actor: Actor = Depends(current_actor),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return _order_response(service.get_order(actor, order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    actor: Actor = Depends(current_actor),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.transition_status(actor, order_id, body.status, rejection_reason=body.rejection_reason)
    return _order_response(order)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    student: Actor = Depends(current_student),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return _order_response(service.cancel_order(student, order_id))
