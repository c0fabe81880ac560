"""Order placement: command and handler.

Every requested line is re-checked against the live menu, priced from the
current menu price, and the whole cart is admitted or refused as one unit.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.menu.menu_item import MenuItem
from canteen.order.order import Order
from canteen.order.pricing import calculate_pricing
from canteen.shared.errors import (
    BelowMinimumOrder,
    CrossShopOrder,
    ItemUnavailable,
    NotFound,
    ShopClosed,
)
from canteen.shop.shop import Shop

logger = structlog.get_logger(__name__)


@canteen.command(part_of="Order")
class PlaceOrder:
    student_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {menu_item_id, quantity}
    delivery_instructions = String(max_length=200)


def parse_lines(lines):
    """Normalise requested lines to ``[{"menu_item_id": str, "quantity": int}]``."""
    if isinstance(lines, str):
        try:
            lines = json.loads(lines)
        except json.JSONDecodeError as exc:
            raise ValidationError({"lines": ["Lines must be a JSON list"]}) from exc

    if not isinstance(lines, list):
        raise ValidationError({"lines": ["Lines must be a list"]})

    parsed = []
    for index, line in enumerate(lines):
        if not isinstance(line, dict) or not line.get("menu_item_id"):
            raise ValidationError({"lines": [f"Line {index} is missing menu_item_id"]})
        quantity = line.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError({"quantity": [f"Line {index} quantity must be a whole number"]})
        if quantity < 1:
            raise ValidationError({"quantity": [f"Line {index} quantity must be at least 1, got {quantity}"]})
        parsed.append({"menu_item_id": str(line["menu_item_id"]), "quantity": quantity})
    return parsed


def load_shop(shop_id):
    try:
        return current_domain.repository_for(Shop).get(shop_id)
    except ObjectNotFoundError as exc:
        raise NotFound("Shop", shop_id) from exc


def price_lines(shop, requested_lines):
    """Snapshot live menu prices for ``requested_lines`` and price them under the shop's policy.

    Returns the order lines (as dicts) and the OrderPricing.
    """
    item_repo = current_domain.repository_for(MenuItem)

    lines_data = []
    for line in requested_lines:
        try:
            item = item_repo.get(line["menu_item_id"])
        except ObjectNotFoundError as exc:
            raise ItemUnavailable(line["menu_item_id"]) from exc

        if not item.is_available:
            raise ItemUnavailable(item.id, item.name)
        if not item.belongs_to(shop.id):
            raise CrossShopOrder(item.id, shop.id)

        lines_data.append(
            {
                "menu_item_id": str(item.id),
                "name": item.name,
                "quantity": line["quantity"],
                "unit_price": item.price,
            }
        )

    pricing = calculate_pricing(
        [(line["unit_price"], line["quantity"]) for line in lines_data],
        shop.policy,
    )
    return lines_data, pricing


def meets_minimum(shop, pricing):
    minimum = shop.policy.minimum_order_amount or 0.0
    return minimum <= 0 or pricing.subtotal >= minimum


@canteen.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        shop = load_shop(command.shop_id)
        if not shop.accepts_orders:
            raise ShopClosed(shop.id)

        lines_data, pricing = price_lines(shop, parse_lines(command.lines))

        if not meets_minimum(shop, pricing):
            raise BelowMinimumOrder(pricing.subtotal, shop.policy.minimum_order_amount)

        order = Order.place(
            student_id=command.student_id,
            shop_id=str(shop.id),
            shop_name=shop.shop_name,
            lines_data=lines_data,
            pricing=pricing,
            delivery_instructions=command.delivery_instructions,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            student_id=str(command.student_id),
            shop_id=str(shop.id),
            total=pricing.total,
        )
        return str(order.id)
