"""Repository for the MenuItem aggregate."""

from canteen.domain import canteen
from canteen.menu.menu_item import MenuItem


def _by_category_and_name(items):
    return sorted(items, key=lambda item: (item.category, item.name.lower()))


@canteen.repository(part_of=MenuItem)
class MenuItemRepository:
    def _fetch_all(self, query):
        result = query.all()
        if result.total > len(result.items):
            result = query.limit(result.total).all()
        return result.items

    def find_for_shop(self, shop_id: str) -> list[MenuItem]:
        """Every item of a shop, sorted by category then name."""
        return _by_category_and_name(self._fetch_all(self._dao.query.filter(shop_id=str(shop_id))))

    def find_available_for_shop(self, shop_id: str) -> list[MenuItem]:
        items = self._fetch_all(self._dao.query.filter(shop_id=str(shop_id), is_available=True))
        return _by_category_and_name(items)

    def find_owned(self, menu_item_id: str, shop_id: str) -> MenuItem | None:
        """The item, only if ``shop_id`` owns it."""
        return self._dao.query.filter(id=str(menu_item_id), shop_id=str(shop_id)).all().first

    def delete_item(self, item: MenuItem) -> None:
        self._dao.delete(item)
