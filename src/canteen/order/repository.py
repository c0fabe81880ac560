"""Repository for the Order aggregate."""

from canteen.domain import canteen
from canteen.order.order import Order
from canteen.shared.actor import Actor, ActorRole


@canteen.repository(part_of=Order)
class OrderRepository:
    """Orders by id, by student and by shop. Listings are newest first."""

    def _newest_first(self, **criteria) -> list[Order]:
        query = self._dao.query.filter(**criteria).order_by("-created_at")
        result = query.all()
        if result.total > len(result.items):
            result = query.limit(result.total).all()
        return result.items

    def find_for_student(self, student_id: str) -> list[Order]:
        return self._newest_first(student_id=str(student_id))

    def find_for_shop(self, shop_id: str) -> list[Order]:
        return self._newest_first(shop_id=str(shop_id))

    def find_for_actor(self, actor: Actor) -> list[Order]:
        if actor.role == ActorRole.STUDENT:
            return self.find_for_student(actor.id)
        return self.find_for_shop(actor.id)
