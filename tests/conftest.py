import os
import uuid
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config environment before the domain module configures logging."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Builders shared by every test layer
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_user():
    """Register a user through the domain and return its id."""
    from marketplace.accounts.registration import RegisterUser
    from protean import current_domain

    def _register(role="vendor", **overrides):
        defaults = {
            "email": f"{role}-{uuid.uuid4().hex[:8]}@example.com",
            "name": "Ravi Patel" if role == "vendor" else "Rajesh Kumar",
            "phone": "+91 98765 43210",
            "location": "Connaught Place, Delhi",
            "role": role,
        }
        if role == "vendor":
            defaults["stall_name"] = "Ravi's Chat Corner"
        else:
            defaults["business_type"] = "wholesaler"
        defaults.update(overrides)
        return current_domain.process(RegisterUser(**defaults), asynchronous=False)

    return _register


@pytest.fixture()
def list_product():
    """List a product for a supplier and return its id."""
    from marketplace.catalogue.creation import CreateProduct
    from protean import current_domain

    def _list(supplier_id, **overrides):
        defaults = {
            "supplier_id": supplier_id,
            "name": "Fresh Tomatoes",
            "category": "Vegetables",
            "description": "Farm fresh red tomatoes, perfect for cooking",
            "unit_price": 25.0,
            "unit": "kg",
            "available_quantity": 500.0,
            "minimum_order": 10.0,
        }
        defaults.update(overrides)
        return current_domain.process(CreateProduct(**defaults), asynchronous=False)

    return _list


@pytest.fixture()
def supplier_id(register_user):
    return register_user("supplier")


@pytest.fixture()
def vendor_id(register_user):
    return register_user("vendor")


@pytest.fixture()
def product_id(list_product, supplier_id):
    return list_product(supplier_id)
