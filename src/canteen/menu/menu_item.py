"""MenuItem aggregate: a dish a shop offers, with its live price and availability."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from canteen.domain import canteen

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "is_veg",
    "is_available",
    "preparation_time",
)


class MenuCategory(Enum):
    MAIN_COURSE = "Main Course"
    STARTERS = "Starters"
    BEVERAGES = "Beverages"
    DESSERTS = "Desserts"
    SNACKS = "Snacks"


@canteen.aggregate
class MenuItem:
    """An item on a shop's menu.

    Only the owning shop edits or deletes it. Orders copy the price at
    placement, so later edits never reach existing orders.
    """

    shop_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    category = String(required=True, choices=MenuCategory)
    is_veg = Boolean(required=True)
    is_available = Boolean(default=True)
    preparation_time = Integer(required=True, min_value=5, max_value=60)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, shop_id, name, description, price, category, is_veg, preparation_time, is_available=True):
        from canteen.menu.events import MenuItemAdded

        now = datetime.now(UTC)
        item = cls(
            shop_id=shop_id,
            name=name.strip(),
            description=description,
            price=price,
            category=category,
            is_veg=is_veg,
            is_available=is_available,
            preparation_time=preparation_time,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            MenuItemAdded(
                menu_item_id=str(item.id),
                shop_id=str(shop_id),
                name=item.name,
                price=price,
                category=category,
            )
        )
        return item

    def belongs_to(self, shop_id):
        return str(self.shop_id) == str(shop_id)

    def update_details(self, **changes):
        """Apply a partial update. Keys outside the editable set are rejected."""
        from canteen.menu.events import MenuItemUpdated

        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be edited"] for field in sorted(unknown)})

        for field, value in changes.items():
            if value is _UNSET or value is None:
                continue
            setattr(self, field, value.strip() if field == "name" else value)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            MenuItemUpdated(
                menu_item_id=str(self.id),
                shop_id=str(self.shop_id),
                price=self.price,
                is_available=self.is_available,
            )
        )
