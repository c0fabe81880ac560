"""Shop registration: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, String
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.shop.shop import Shop

logger = structlog.get_logger(__name__)


@canteen.command(part_of="Shop")
class RegisterShop:
    """Create a shopkeeper account together with the shop it runs."""

    owner_name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    phone: String(required=True, max_length=10)
    shop_name: String(required=True, max_length=100)
    location: String(required=True, max_length=50)
    shop_type: String(required=True, max_length=50)
    delivery_fee: Float(min_value=0.0, default=0.0)
    minimum_order_amount: Float(min_value=0.0, default=0.0)
    free_delivery_above: Float(min_value=0.0)


@canteen.command_handler(part_of=Shop)
class RegisterShopHandler:
    @handle(RegisterShop)
    def register_shop(self, command):
        repo = current_domain.repository_for(Shop)
        email = command.email.strip().lower()

        if repo.find_by_email(email):
            raise ValidationError({"email": ["Shopkeeper with this email already exists"]})
        if repo.find_by_shop_name(command.shop_name.strip()):
            raise ValidationError({"shop_name": ["Shop name is already taken"]})

        shop = Shop.register(
            owner_name=command.owner_name,
            email=email,
            phone=command.phone,
            shop_name=command.shop_name,
            location=command.location,
            shop_type=command.shop_type,
            delivery_fee=command.delivery_fee,
            minimum_order_amount=command.minimum_order_amount,
            free_delivery_above=command.free_delivery_above,
        )
        repo.add(shop)

        logger.info("Shop registered", shop_id=str(shop.id), shop_name=shop.shop_name)
        return str(shop.id)
