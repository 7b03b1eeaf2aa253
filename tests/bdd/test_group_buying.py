"""BDD tests for pooling vendor demand through group orders."""

from datetime import UTC, datetime, timedelta

import pytest
from marketplace.catalogue.product import Product
from marketplace.group_buying.creation import CreateGroupOrder
from marketplace.group_buying.group_order import GroupOrder
from marketplace.group_buying.joining import join_group_order
from marketplace.shared.errors import Expired, MarketplaceError
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/group_buying.feature")


@pytest.fixture()
def group():
    return {"id": None}


def _group_order(group):
    return current_domain.repository_for(GroupOrder).get(group["id"])


@given(
    parsers.cfparse(
        'vendor "{vendor}" opens a group order on "{product}" for {target:g} kg at {discount:g} closing in {days:d} days'
    )
)
def vendor_opens_group_order(parties, listings, group, vendor, product, target, discount, days):
    product_record = current_domain.repository_for(Product).get(listings[product])
    group["id"] = current_domain.process(
        CreateGroupOrder(
            creator_id=parties[vendor],
            supplier_id=str(product_record.supplier_id),
            product_id=listings[product],
            target_quantity=target,
            discount_price=discount,
            deadline=datetime.now(UTC) + timedelta(days=days),
            delivery_address="Connaught Place, Delhi",
        ),
        asynchronous=False,
    )


@given("the group order deadline has passed")
def deadline_has_passed(group):
    repo = current_domain.repository_for(GroupOrder)
    group_order = repo.get(group["id"])
    group_order.deadline = datetime.now(UTC) - timedelta(minutes=1)
    repo.add(group_order)


@when(parsers.cfparse('vendor "{vendor}" joins the group order with {quantity:g} kg'))
def vendor_joins(parties, group, error, vendor, quantity):
    try:
        join_group_order(parties[vendor], group["id"], quantity)
    except MarketplaceError as exc:
        error["exc"] = exc


@then(parsers.cfparse("the group order holds {quantity:g} kg"))
def group_order_holds(group, quantity):
    assert _group_order(group).current_quantity == quantity


@then(parsers.cfparse('the group order status is "{status}"'))
def group_order_status_is(group, status):
    assert _group_order(group).status == status


@then("the join is rejected as expired")
def join_rejected_as_expired(error):
    assert isinstance(error["exc"], Expired), f"Expected Expired, got {error['exc']!r}"
