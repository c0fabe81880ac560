"""Order cancellation by the student: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.order.order import Order, OrderStatus
from canteen.order.status import load_visible_order
from canteen.shared.actor import Actor

logger = structlog.get_logger(__name__)


@canteen.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    student_id = Identifier(required=True)


@canteen.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        student = Actor.student(command.student_id)
        order = load_visible_order(command.order_id, student)

        order.transition(OrderStatus.CANCELLED, student)
        current_domain.repository_for(Order).add(order)

        logger.info("Order cancelled", order_id=str(order.id), student_id=str(command.student_id))
