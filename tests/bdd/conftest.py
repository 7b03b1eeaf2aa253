"""Shared BDD fixtures and step definitions for marketplace scenarios.

Scenarios drive the domain through its commands, the same way the API does.
Users and products are referred to by name in the feature files and resolved
through the ``parties`` and ``listings`` fixtures.
"""

import pytest
from marketplace.accounts.user import User
from marketplace.catalogue.product import Product
from marketplace.shared.errors import Conflict
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def parties():
    """Registered user ids keyed by name."""
    return {}


@pytest.fixture()
def listings():
    """Listed product ids keyed by product name."""
    return {}


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('vendor "{name}" is registered'))
def vendor_registered(register_user, parties, name):
    parties[name] = register_user("vendor", name=name)


@given(
    parsers.cfparse(
        'supplier "{name}" lists "{product}" at {price:g} per {unit} with minimum {minimum:g} and stock {stock:g}'
    )
)
def supplier_lists_product(register_user, list_product, parties, listings, name, product, price, unit, minimum, stock):
    parties[name] = register_user("supplier", name=name)
    listings[product] = list_product(
        parties[name],
        name=product,
        unit_price=price,
        unit=unit,
        minimum_order=minimum,
        available_quantity=stock,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{product}" has {quantity:g} available'))
def product_has_available(listings, product, quantity):
    assert current_domain.repository_for(Product).get(listings[product]).available_quantity == quantity


@then(parsers.cfparse('supplier "{name}" has rating {rating:g} from {count:d} ratings'))
def supplier_has_rating(parties, name, rating, count):
    supplier = current_domain.repository_for(User).get(parties[name])
    assert supplier.rating == rating
    assert supplier.total_ratings == count


@then(parsers.cfparse('supplier "{name}" has no ratings'))
def supplier_has_no_ratings(parties, name):
    supplier = current_domain.repository_for(User).get(parties[name])
    assert supplier.rating is None
    assert supplier.total_ratings == 0


@then(parsers.cfparse("the {action} is rejected as a conflict"))
def rejected_as_conflict(error, action):
    assert isinstance(error["exc"], Conflict), f"Expected Conflict, got {error['exc']!r}"
