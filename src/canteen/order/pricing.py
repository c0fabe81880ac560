"""Order pricing: subtotal, delivery fee and total for one shop's lines.

A pure calculation with no repository access, so the same code prices a
placed order and a quote for a cart that has not been submitted yet. The
shop's minimum order amount is deliberately not consulted here; admission is
checked at placement.
"""

from collections.abc import Iterable

from canteen.order.order import OrderPricing
from canteen.shared.errors import EmptyOrder, InvalidLineItem
from canteen.shop.shop import DeliveryPolicy


def _money(amount) -> float:
    return round(float(amount), 2)


def delivery_fee_for(subtotal: float, policy: DeliveryPolicy) -> float:
    """The fee ``policy`` charges on ``subtotal``."""
    fee = policy.delivery_fee or 0.0
    if fee == 0:
        return 0.0
    threshold = policy.free_delivery_above
    if threshold is not None and subtotal >= threshold:
        return 0.0
    return _money(fee)


def calculate_pricing(lines: Iterable[tuple[float, int]], policy: DeliveryPolicy) -> OrderPricing:
    """Price ``(unit_price, quantity)`` pairs under a shop's delivery policy.

    Raises:
        EmptyOrder: no lines were given.
        InvalidLineItem: a price or quantity is negative.
    """
    lines = list(lines)
    if not lines:
        raise EmptyOrder()

    subtotal = 0.0
    for unit_price, quantity in lines:
        if unit_price is None or unit_price < 0:
            raise InvalidLineItem("price", unit_price)
        if quantity is None or quantity < 0:
            raise InvalidLineItem("quantity", quantity)
        subtotal += unit_price * quantity

    subtotal = _money(subtotal)
    delivery_fee = delivery_fee_for(subtotal, policy)

    return OrderPricing(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        total=_money(subtotal + delivery_fee),
    )
