"""Repository for the Shop aggregate."""

from canteen.domain import canteen
from canteen.shop.shop import Shop


@canteen.repository(part_of=Shop)
class ShopRepository:
    def find_by_email(self, email: str) -> Shop | None:
        return self._dao.query.filter(email_address=email).all().first

    def find_by_shop_name(self, shop_name: str) -> Shop | None:
        return self._dao.query.filter(shop_name=shop_name).all().first

    def find_by_id(self, shop_id) -> Shop | None:
        return self._dao.query.filter(id=str(shop_id)).all().first

    def find_active(self) -> list[Shop]:
        """Active shops, alphabetically by shop name."""
        query = self._dao.query.filter(is_active=True).order_by("shop_name")
        result = query.all()
        if result.total > len(result.items):
            result = query.limit(result.total).all()
        return result.items
