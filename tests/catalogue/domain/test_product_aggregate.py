"""Domain tests for the Product aggregate."""

import json

import pytest
from marketplace.catalogue.events import ProductListed, ProductUpdated, StockWithdrawn
from marketplace.catalogue.product import Product
from protean.exceptions import ValidationError


def _product(**overrides):
    defaults = {
        "supplier_id": "sup-001",
        "name": "Yellow Onions",
        "category": "Vegetables",
        "unit_price": 20.0,
        "unit": "kg",
        "available_quantity": 300.0,
        "minimum_order": 5.0,
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_fields_set(self):
        product = _product()
        assert product.name == "Yellow Onions"
        assert product.unit_price == 20.0
        assert product.available_quantity == 300.0
        assert product.created_at is not None
        assert product.updated_at == product.created_at

    def test_minimum_order_defaults_to_one(self):
        product = _product(minimum_order=None)
        assert product.minimum_order == 1.0

    def test_raises_product_listed(self):
        product = _product()
        assert len(product._events) == 1
        assert isinstance(product._events[0], ProductListed)
        assert product._events[0].supplier_id == "sup-001"

    def test_unit_price_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            _product(unit_price=0)
        assert "unit_price" in exc.value.messages

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _product(available_quantity=-1)

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            _product(name="   ")

    def test_ownership(self):
        product = _product()
        assert product.is_owned_by("sup-001")
        assert not product.is_owned_by("sup-002")


class TestProductEdits:
    def test_merges_given_fields(self):
        product = _product()
        product.update_details(unit_price=22.5, description="Red onions")
        assert product.unit_price == 22.5
        assert product.description == "Red onions"
        assert product.name == "Yellow Onions"

    def test_raises_product_updated_with_field_names(self):
        product = _product()
        product._events.clear()
        product.update_details(available_quantity=250.0, unit_price=21.0)
        event = product._events[0]
        assert isinstance(event, ProductUpdated)
        assert json.loads(event.changed_fields) == ["available_quantity", "unit_price"]

    def test_owner_cannot_be_changed(self):
        product = _product()
        with pytest.raises(ValidationError) as exc:
            product.update_details(supplier_id="sup-999")
        assert "supplier_id" in exc.value.messages

    def test_edit_keeps_price_positive(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.update_details(unit_price=-5.0)


class TestStockChecks:
    def test_below_minimum_order(self):
        product = _product()
        with pytest.raises(ValidationError) as exc:
            product.check_minimum_order(4)
        assert "Minimum order for Yellow Onions is 5 kg" in str(exc.value.messages)

    def test_at_minimum_order(self):
        _product().check_minimum_order(5)

    def test_more_than_available(self):
        product = _product(available_quantity=10.0, minimum_order=1.0)
        with pytest.raises(ValidationError) as exc:
            product.check_available(11)
        assert "Not enough Yellow Onions available. Available: 10 kg" in str(exc.value.messages)


class TestStockWithdrawal:
    def test_reduces_available_quantity(self):
        product = _product()
        product.withdraw_stock(30.0, "ord-001")
        assert product.available_quantity == 270.0

    def test_can_empty_stock(self):
        product = _product(available_quantity=5.0)
        product.withdraw_stock(5.0, "ord-001")
        assert product.available_quantity == 0.0

    def test_cannot_overdraw(self):
        product = _product(available_quantity=5.0)
        with pytest.raises(ValidationError):
            product.withdraw_stock(6.0, "ord-001")
        assert product.available_quantity == 5.0

    def test_raises_stock_withdrawn(self):
        product = _product()
        product._events.clear()
        product.withdraw_stock(10.0, "ord-002")
        event = product._events[0]
        assert isinstance(event, StockWithdrawn)
        assert event.previous_quantity == 300.0
        assert event.available_quantity == 290.0
        assert event.order_id == "ord-002"
