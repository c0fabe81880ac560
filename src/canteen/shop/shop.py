"""Shop aggregate (the shopkeeper's account) with its DeliveryPolicy value object."""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String, ValueObject

from canteen.domain import canteen
from canteen.shared.email import EmailAddress
from canteen.shared.phone import PhoneNumber

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class ShopLocation(Enum):
    CAMPUS = "Campus"
    GATE_1 = "Gate 1"
    GATE_2 = "Gate 2"
    HOSTEL_AREA = "Hostel Area"
    ACADEMIC_BLOCK = "Academic Block"
    FOOD_COURT = "Food Court"


class ShopType(Enum):
    FAST_FOOD = "Fast Food"
    INDIAN = "Indian"
    CHINESE = "Chinese"
    SOUTH_INDIAN = "South Indian"
    BEVERAGES = "Beverages"
    SNACKS = "Snacks"
    DESSERTS = "Desserts"


@canteen.value_object(part_of="Shop")
class DeliveryPolicy:
    """What a shop charges to deliver, and when it waives the charge.

    ``minimum_order_amount`` is an admission threshold checked at placement;
    it never changes the fee itself.
    """

    delivery_fee: Float(min_value=0.0, default=0.0)
    minimum_order_amount: Float(min_value=0.0, default=0.0)
    free_delivery_above: Float(min_value=0.0)


@canteen.aggregate
class Shop:
    """A campus shop that publishes a menu and receives orders."""

    owner_name: String(required=True, max_length=100)
    email: ValueObject(EmailAddress, required=True)
    phone: ValueObject(PhoneNumber, required=True)
    shop_name: String(required=True, max_length=100, unique=True)
    location: String(required=True, choices=ShopLocation)
    shop_type: String(required=True, choices=ShopType)
    is_active: Boolean(default=True)
    is_verified: Boolean(default=True)
    is_open: Boolean(default=True)
    delivery_policy: ValueObject(DeliveryPolicy)
    registered_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def shop_name_cannot_be_blank(self):
        if not (self.shop_name or "").strip():
            raise ValidationError({"shop_name": ["Shop name is required"]})

    @property
    def accepts_orders(self):
        return bool(self.is_active and self.is_open)

    @property
    def policy(self):
        """The delivery policy, defaulting to free delivery with no minimum."""
        return self.delivery_policy or DeliveryPolicy()

    @classmethod
    def register(
        cls,
        owner_name,
        email,
        phone,
        shop_name,
        location,
        shop_type,
        delivery_fee=0.0,
        minimum_order_amount=0.0,
        free_delivery_above=None,
    ):
        from canteen.shop.events import ShopRegistered

        now = datetime.now(UTC)
        shop = cls(
            owner_name=owner_name.strip(),
            email=EmailAddress(address=email.strip().lower()),
            phone=PhoneNumber(number=phone),
            shop_name=shop_name.strip(),
            location=location,
            shop_type=shop_type,
            delivery_policy=DeliveryPolicy(
                delivery_fee=delivery_fee or 0.0,
                minimum_order_amount=minimum_order_amount or 0.0,
                free_delivery_above=free_delivery_above,
            ),
            registered_at=now,
            updated_at=now,
        )
        shop.raise_(
            ShopRegistered(
                shop_id=str(shop.id),
                shop_name=shop.shop_name,
                email=shop.email.address,
                location=location,
                shop_type=shop_type,
                registered_at=now,
            )
        )
        return shop

    def update_profile(
        self,
        owner_name=_UNSET,
        phone=_UNSET,
        shop_name=_UNSET,
        location=_UNSET,
        shop_type=_UNSET,
        is_open=_UNSET,
    ):
        from canteen.shop.events import ShopProfileUpdated

        with atomic_change(self):
            if owner_name is not _UNSET and owner_name is not None:
                self.owner_name = owner_name.strip()
            if phone is not _UNSET and phone is not None:
                self.phone = PhoneNumber(number=phone)
            if shop_name is not _UNSET and shop_name is not None:
                self.shop_name = shop_name.strip()
            if location is not _UNSET and location is not None:
                self.location = location
            if shop_type is not _UNSET and shop_type is not None:
                self.shop_type = shop_type
            if is_open is not _UNSET and is_open is not None:
                self.is_open = is_open
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ShopProfileUpdated(
                shop_id=str(self.id),
                shop_name=self.shop_name,
                location=self.location,
                shop_type=self.shop_type,
                is_open=self.is_open,
            )
        )

    def update_delivery_policy(
        self,
        delivery_fee=_UNSET,
        minimum_order_amount=_UNSET,
        free_delivery_above=_UNSET,
    ):
        """Replace the delivery policy; omitted values keep their current setting.

        Passing ``free_delivery_above=None`` explicitly removes the threshold.
        """
        from canteen.shop.events import DeliveryPolicyChanged

        current = self.policy
        self.delivery_policy = DeliveryPolicy(
            delivery_fee=current.delivery_fee if delivery_fee is _UNSET else delivery_fee,
            minimum_order_amount=(
                current.minimum_order_amount if minimum_order_amount is _UNSET else minimum_order_amount
            ),
            free_delivery_above=current.free_delivery_above if free_delivery_above is _UNSET else free_delivery_above,
        )
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DeliveryPolicyChanged(
                shop_id=str(self.id),
                delivery_fee=self.delivery_policy.delivery_fee,
                minimum_order_amount=self.delivery_policy.minimum_order_amount,
                free_delivery_above=self.delivery_policy.free_delivery_above,
            )
        )
