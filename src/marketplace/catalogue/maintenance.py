"""Product edits and removal — commands and handler.

Both operations are reserved to the supplier that owns the product. Removal
is permanent and does not look at orders that still reference the product.
"""

import structlog
from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import EDITABLE_FIELDS, Product
from marketplace.domain import marketplace
from marketplace.shared.errors import Forbidden

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class UpdateProduct:
    supplier_id = Identifier(required=True)  # the calling supplier
    product_id = Identifier(required=True)
    name = String(max_length=255)
    category = String(max_length=100)
    description = Text()
    unit_price = Float()
    unit = String(max_length=20)
    available_quantity = Float()
    minimum_order = Float()
    expiry_date = DateTime()
    image_url = String(max_length=500)


@marketplace.command(part_of="Product")
class DeleteProduct:
    supplier_id = Identifier(required=True)  # the calling supplier
    product_id = Identifier(required=True)


def _owned_product(repo, product_id, supplier_id, action):
    product = repo.get(product_id)
    if not product.is_owned_by(supplier_id):
        logger.warning(
            "Product change refused, caller is not the owner",
            product_id=str(product_id),
            caller_id=str(supplier_id),
        )
        raise Forbidden(f"You can only {action} your own products")
    return product


@marketplace.command_handler(part_of=Product)
class ProductMaintenanceHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = _owned_product(repo, command.product_id, command.supplier_id, "update")

        changes = {field: getattr(command, field) for field in EDITABLE_FIELDS if getattr(command, field) is not None}
        product.update_details(**changes)
        repo.add(product)

        logger.info("Product updated", product_id=str(product.id), fields=sorted(changes))

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = _owned_product(repo, command.product_id, command.supplier_id, "delete")

        repo._dao.delete(product)

        logger.info("Product deleted", product_id=str(command.product_id))
