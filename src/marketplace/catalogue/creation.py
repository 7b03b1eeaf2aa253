"""Product listing — command and handler."""

import structlog
from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.accounts.access import require_supplier
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class CreateProduct:
    supplier_id = Identifier(required=True)  # the calling supplier
    name = String(required=True, max_length=255)
    category = String(required=True, max_length=100)
    unit_price = Float(required=True)
    unit = String(required=True, max_length=20)
    available_quantity = Float(required=True)
    minimum_order = Float()
    description = Text()
    expiry_date = DateTime()
    image_url = String(max_length=500)


@marketplace.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        supplier = require_supplier(command.supplier_id, "create products")

        product = Product.create(
            supplier_id=supplier.id,
            name=command.name,
            category=command.category,
            unit_price=command.unit_price,
            unit=command.unit,
            available_quantity=command.available_quantity,
            minimum_order=command.minimum_order,
            description=command.description,
            expiry_date=command.expiry_date,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product listed", product_id=str(product.id), supplier_id=str(supplier.id))
        return str(product.id)
