"""Pydantic request/response schemas for the canteen API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------
class RegisterStudentRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Asha Verma",
                    "email": "asha@thapar.edu",
                    "roll_number": "102103001",
                    "hostel": "J",
                    "phone": "9876543210",
                    "year": 2,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    roll_number: str = Field(..., min_length=9, max_length=9)
    hostel: str
    phone: str = Field(..., min_length=10, max_length=10)
    year: int = Field(..., ge=1, le=4)


class UpdateStudentProfileRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    hostel: str | None = None
    phone: str | None = Field(None, min_length=10, max_length=10)
    year: int | None = Field(None, ge=1, le=4)


class StudentResponse(BaseModel):
    student_id: str
    name: str
    email: str
    roll_number: str
    hostel: str
    phone: str
    year: int


class StudentIdResponse(BaseModel):
    student_id: str


# ---------------------------------------------------------------------------
# Shops
# ---------------------------------------------------------------------------
class RegisterShopRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "owner_name": "Ravi Kumar",
                    "email": "ravi@example.com",
                    "phone": "9123456780",
                    "shop_name": "Night Canteen",
                    "location": "Hostel Area",
                    "shop_type": "Fast Food",
                    "delivery_fee": 20.0,
                    "minimum_order_amount": 50.0,
                    "free_delivery_above": 200.0,
                }
            ]
        }
    }

    owner_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    phone: str = Field(..., min_length=10, max_length=10)
    shop_name: str = Field(..., min_length=1, max_length=100)
    location: str
    shop_type: str
    delivery_fee: float = Field(0.0, ge=0)
    minimum_order_amount: float = Field(0.0, ge=0)
    free_delivery_above: float | None = Field(None, ge=0)


class UpdateShopProfileRequest(BaseModel):
    owner_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, min_length=10, max_length=10)
    shop_name: str | None = Field(None, max_length=100)
    location: str | None = None
    shop_type: str | None = None
    is_open: bool | None = None


class DeliveryPolicyRequest(BaseModel):
    """Omitted fields keep their value; an explicit null clears the free-delivery threshold."""

    delivery_fee: float | None = Field(None, ge=0)
    minimum_order_amount: float | None = Field(None, ge=0)
    free_delivery_above: float | None = Field(None, ge=0)


class DeliveryPolicySchema(BaseModel):
    delivery_fee: float
    minimum_order_amount: float
    free_delivery_above: float | None = None


class ShopResponse(BaseModel):
    shop_id: str
    owner_name: str
    shop_name: str
    email: str
    phone: str
    location: str
    shop_type: str
    is_active: bool
    is_verified: bool
    is_open: bool
    delivery_policy: DeliveryPolicySchema


class ShopIdResponse(BaseModel):
    shop_id: str


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------
class AddMenuItemRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Paneer Roll",
                    "description": "Grilled paneer wrapped in a paratha",
                    "price": 60.0,
                    "category": "Snacks",
                    "is_veg": True,
                    "preparation_time": 10,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    description: str
    price: float = Field(..., ge=0)
    category: str
    is_veg: bool
    is_available: bool = True
    preparation_time: int = Field(..., ge=5, le=60)


class UpdateMenuItemRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    category: str | None = None
    is_veg: bool | None = None
    is_available: bool | None = None
    preparation_time: int | None = Field(None, ge=5, le=60)


class MenuItemResponse(BaseModel):
    menu_item_id: str
    shop_id: str
    name: str
    description: str
    price: float
    category: str
    is_veg: bool
    is_available: bool
    preparation_time: int


class MenuItemIdResponse(BaseModel):
    menu_item_id: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    menu_item_id: str
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shop_id": "shop-001",
                    "lines": [{"menu_item_id": "item-001", "quantity": 2}],
                    "delivery_instructions": "Leave at the hostel gate",
                }
            ]
        }
    }

    shop_id: str
    lines: list[OrderLineRequest]
    delivery_instructions: str | None = Field(None, max_length=200)


class QuoteRequest(BaseModel):
    shop_id: str
    lines: list[OrderLineRequest]


class QuoteResponse(BaseModel):
    shop_id: str
    subtotal: float
    delivery_fee: float
    total: float
    minimum_order_amount: float
    meets_minimum: bool


class UpdateOrderStatusRequest(BaseModel):
    status: str
    rejection_reason: str | None = Field(None, max_length=500)


class OrderLineResponse(BaseModel):
    menu_item_id: str
    name: str
    quantity: int
    unit_price: float
    line_total: float


class StudentContactSchema(BaseModel):
    """Who to deliver to. Shown to the shop on every order."""

    name: str
    roll_number: str
    hostel: str
    phone: str


class OrderResponse(BaseModel):
    order_id: str
    student_id: str
    student: StudentContactSchema | None = None
    shop_id: str
    shop_name: str | None = None
    shop_location: str | None = None
    lines: list[OrderLineResponse]
    subtotal: float
    delivery_fee: float
    total: float
    status: str
    is_terminal: bool
    payment_method: str
    delivery_instructions: str | None = None
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class StatusResponse(BaseModel):
    status: str = "ok"
