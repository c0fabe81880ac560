"""Domain events for the Shop aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from canteen.domain import canteen


@canteen.event(part_of="Shop")
class ShopRegistered:
    """A shopkeeper opened an account for their shop."""

    __version__ = 1

    shop_id: Identifier(required=True)
    shop_name: String(required=True)
    email: String(required=True)
    location: String(required=True)
    shop_type: String(required=True)
    registered_at: DateTime(required=True)


@canteen.event(part_of="Shop")
class ShopProfileUpdated:
    __version__ = 1

    shop_id: Identifier(required=True)
    shop_name: String(required=True)
    location: String(required=True)
    shop_type: String(required=True)
    is_open: Boolean()


@canteen.event(part_of="Shop")
class DeliveryPolicyChanged:
    """Fee, minimum order or free-delivery threshold changed.

    Orders already placed keep the pricing captured at placement.
    """

    __version__ = 1

    shop_id: Identifier(required=True)
    delivery_fee: Float(required=True)
    minimum_order_amount: Float(required=True)
    free_delivery_above: Float()
