"""Shop profile and delivery policy management: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.shop.shop import Shop

logger = structlog.get_logger(__name__)


@canteen.command(part_of="Shop")
class UpdateShopProfile:
    shop_id: Identifier(required=True)
    owner_name: String(max_length=100)
    phone: String(max_length=10)
    shop_name: String(max_length=100)
    location: String(max_length=50)
    shop_type: String(max_length=50)
    is_open: Boolean()


@canteen.command(part_of="Shop")
class ChangeDeliveryPolicy:
    """Change any part of the delivery policy; unset fields keep their value."""

    shop_id: Identifier(required=True)
    delivery_fee: Float(min_value=0.0)
    minimum_order_amount: Float(min_value=0.0)
    free_delivery_above: Float(min_value=0.0)
    clear_free_delivery_above: Boolean(default=False)


@canteen.command_handler(part_of=Shop)
class ManageShopProfileHandler:
    @handle(UpdateShopProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Shop)
        shop = repo.get(command.shop_id)

        if command.shop_name and command.shop_name.strip() != shop.shop_name:
            existing = repo.find_by_shop_name(command.shop_name.strip())
            if existing and str(existing.id) != str(shop.id):
                raise ValidationError({"shop_name": ["Shop name is already taken"]})

        shop.update_profile(
            owner_name=command.owner_name,
            phone=command.phone,
            shop_name=command.shop_name,
            location=command.location,
            shop_type=command.shop_type,
            is_open=command.is_open,
        )
        repo.add(shop)
        logger.info("Shop profile updated", shop_id=str(shop.id), is_open=bool(shop.is_open))

    @handle(ChangeDeliveryPolicy)
    def change_delivery_policy(self, command):
        repo = current_domain.repository_for(Shop)
        shop = repo.get(command.shop_id)

        changes = {}
        if command.delivery_fee is not None:
            changes["delivery_fee"] = command.delivery_fee
        if command.minimum_order_amount is not None:
            changes["minimum_order_amount"] = command.minimum_order_amount
        if command.clear_free_delivery_above:
            changes["free_delivery_above"] = None
        elif command.free_delivery_above is not None:
            changes["free_delivery_above"] = command.free_delivery_above

        shop.update_delivery_policy(**changes)
        repo.add(shop)
        logger.info("Delivery policy changed", shop_id=str(shop.id), **changes)
