"""Order status updates: command and handler.

All role and ownership rules come from the Order transition table; this
handler only resolves the order and hides it from actors who cannot see it.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.order.order import Order
from canteen.shared.actor import Actor, ActorRole
from canteen.shared.errors import NotFound

logger = structlog.get_logger(__name__)


@canteen.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=ActorRole)
    status = String(required=True, max_length=20)
    rejection_reason = String(max_length=500)


def load_visible_order(order_id, actor):
    """The order, or ``NotFound`` when it is missing or not the actor's."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError as exc:
        raise NotFound("Order", order_id) from exc

    if not order.is_visible_to(actor):
        raise NotFound("Order", order_id)
    return order


@canteen.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        actor = Actor(id=str(command.actor_id), role=ActorRole(command.actor_role))
        order = load_visible_order(command.order_id, actor)

        previous = order.status
        order.transition(command.status, actor, rejection_reason=command.rejection_reason)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.status,
            actor_role=actor.role.value,
        )
        return order.status
