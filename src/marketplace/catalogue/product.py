"""Product aggregate — an ingredient listed by one supplier.

Stock is tracked as ``available_quantity`` in the product's own unit (kg,
pieces, litres). It is changed either by the owning supplier editing the
listing or by orders withdrawing stock, and it never drops below zero.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.catalogue.events import ProductListed, ProductUpdated, StockWithdrawn
from marketplace.domain import marketplace

# Fields a supplier may edit after listing
EDITABLE_FIELDS = (
    "name",
    "category",
    "description",
    "unit_price",
    "unit",
    "available_quantity",
    "minimum_order",
    "expiry_date",
    "image_url",
)


@marketplace.aggregate
class Product:
    """A product offered by a supplier."""

    supplier_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category = String(required=True, max_length=100)
    description = Text()
    unit_price = Float(required=True)
    unit = String(required=True, max_length=20)
    available_quantity = Float(required=True, min_value=0.0)
    minimum_order = Float(default=1.0, min_value=0.0)
    expiry_date = DateTime()
    image_url = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def unit_price_must_be_positive(self):
        if self.unit_price is not None and self.unit_price <= 0:
            raise ValidationError({"unit_price": ["Unit price must be greater than zero"]})

    @invariant.post
    def name_must_not_be_blank(self):
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": ["Product name cannot be empty"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        supplier_id,
        name,
        category,
        unit_price,
        unit,
        available_quantity,
        minimum_order=None,
        description=None,
        expiry_date=None,
        image_url=None,
    ):
        now = datetime.now(UTC)

        product = cls(
            supplier_id=supplier_id,
            name=name,
            category=category,
            description=description,
            unit_price=unit_price,
            unit=unit,
            available_quantity=available_quantity,
            minimum_order=minimum_order if minimum_order is not None else 1.0,
            expiry_date=expiry_date,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                supplier_id=str(supplier_id),
                name=name,
                category=category,
                unit_price=unit_price,
                unit=unit,
                available_quantity=available_quantity,
                listed_at=now,
            )
        )
        return product

    def is_owned_by(self, supplier_id) -> bool:
        return str(self.supplier_id) == str(supplier_id)

    # -------------------------------------------------------------------
    # Supplier edits
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Merge the given fields into the listing. The owner cannot be changed."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        now = datetime.now(UTC)
        with atomic_change(self):
            for field, value in changes.items():
                setattr(self, field, value)
            self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                supplier_id=str(self.supplier_id),
                changed_fields=json.dumps(sorted(changes)),
                unit_price=self.unit_price,
                available_quantity=self.available_quantity,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def check_minimum_order(self, quantity):
        if quantity < (self.minimum_order or 0):
            raise ValidationError(
                {"quantity": [f"Minimum order for {self.name} is {_fmt(self.minimum_order)} {self.unit}"]}
            )

    def check_available(self, quantity):
        if quantity > self.available_quantity:
            raise ValidationError(
                {"quantity": [f"Not enough {self.name} available. Available: {_fmt(self.available_quantity)} {self.unit}"]}
            )

    def withdraw_stock(self, quantity, order_id):
        """Take ``quantity`` out of available stock for an order."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than 0"]})
        self.check_available(quantity)

        now = datetime.now(UTC)
        previous = self.available_quantity
        self.available_quantity = previous - quantity
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                order_id=str(order_id),
                quantity=quantity,
                previous_quantity=previous,
                available_quantity=self.available_quantity,
                withdrawn_at=now,
            )
        )


def _fmt(quantity):
    """Render 10.0 as "10" and 2.5 as "2.5" in messages."""
    return f"{quantity:g}"
