"""Domain events for the MenuItem aggregate."""

from protean.fields import Boolean, Float, Identifier, String

from canteen.domain import canteen


@canteen.event(part_of="MenuItem")
class MenuItemAdded:
    __version__ = 1

    menu_item_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    category = String(required=True)


@canteen.event(part_of="MenuItem")
class MenuItemUpdated:
    """Price or availability may have changed; existing orders are unaffected."""

    __version__ = 1

    menu_item_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    price = Float(required=True)
    is_available = Boolean()
