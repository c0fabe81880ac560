"""Menu management: commands and handler.

Shops manage only their own items: an item owned by another shop is reported
as missing rather than forbidden, so item ids do not leak across shops.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.menu.menu_item import MenuItem
from canteen.shared.errors import NotFound
from canteen.shop.shop import Shop

logger = structlog.get_logger(__name__)


@canteen.command(part_of="MenuItem")
class AddMenuItem:
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    category = String(required=True, max_length=50)
    is_veg = Boolean(required=True)
    is_available = Boolean(default=True)
    preparation_time = Integer(required=True, min_value=5, max_value=60)


@canteen.command(part_of="MenuItem")
class UpdateMenuItem:
    shop_id = Identifier(required=True)
    menu_item_id = Identifier(required=True)
    name = String(max_length=100)
    description = Text()
    price = Float(min_value=0.0)
    category = String(max_length=50)
    is_veg = Boolean()
    is_available = Boolean()
    preparation_time = Integer(min_value=5, max_value=60)


@canteen.command(part_of="MenuItem")
class RemoveMenuItem:
    shop_id = Identifier(required=True)
    menu_item_id = Identifier(required=True)


def _owned_item(repo, menu_item_id, shop_id):
    item = repo.find_owned(menu_item_id, shop_id)
    if item is None:
        raise NotFound("MenuItem", menu_item_id)
    return item


@canteen.command_handler(part_of=MenuItem)
class ManageMenuHandler:
    @handle(AddMenuItem)
    def add_menu_item(self, command):
        # Raises ObjectNotFoundError for unknown shops
        current_domain.repository_for(Shop).get(command.shop_id)

        item = MenuItem.create(
            shop_id=command.shop_id,
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            is_veg=command.is_veg,
            is_available=command.is_available,
            preparation_time=command.preparation_time,
        )
        current_domain.repository_for(MenuItem).add(item)

        logger.info("Menu item added", shop_id=str(command.shop_id), menu_item_id=str(item.id))
        return str(item.id)

    @handle(UpdateMenuItem)
    def update_menu_item(self, command):
        repo = current_domain.repository_for(MenuItem)
        item = _owned_item(repo, command.menu_item_id, command.shop_id)
        item.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            is_veg=command.is_veg,
            is_available=command.is_available,
            preparation_time=command.preparation_time,
        )
        repo.add(item)

    @handle(RemoveMenuItem)
    def remove_menu_item(self, command):
        repo = current_domain.repository_for(MenuItem)
        item = _owned_item(repo, command.menu_item_id, command.shop_id)
        repo.delete_item(item)

        logger.info("Menu item removed", shop_id=str(command.shop_id), menu_item_id=str(command.menu_item_id))
