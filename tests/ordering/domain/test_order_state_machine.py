"""Domain tests for the Order aggregate and its status state machine."""

import json

import pytest
from marketplace.ordering.events import OrderPlaced, OrderStatusChanged
from marketplace.ordering.order import Order, OrderStatus
from protean.exceptions import ValidationError


def _order(lines=None, **overrides):
    defaults = {
        "vendor_id": "ven-001",
        "supplier_id": "sup-001",
        "lines": lines or [("prod-tomato", 20.0, 25.0), ("prod-onion", 10.0, 20.0)],
        "delivery_address": "Stall 12, Connaught Place, Delhi",
    }
    defaults.update(overrides)
    return Order.place(**defaults)


def _order_in(status):
    order = _order()
    if status != OrderStatus.PENDING.value:
        order.change_status(status)
    order._events.clear()
    return order


class TestOrderPlacement:
    def test_total_is_sum_of_line_totals(self):
        order = _order()
        assert order.total_amount == 700.0
        assert [item.total_price for item in order.items] == [500.0, 200.0]

    def test_starts_pending_and_individual(self):
        order = _order()
        assert order.status == "pending"
        assert order.order_type == "individual"

    def test_group_order_reference(self):
        order = _order(order_type="group", group_order_id="grp-001")
        assert order.order_type == "group"
        assert order.group_order_id == "grp-001"

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(vendor_id="ven-001", supplier_id="sup-001", lines=[], delivery_address="Delhi")
        assert "items" in exc.value.messages

    def test_raises_order_placed(self):
        order = _order()
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.total_amount == 700.0
        assert [item["product_id"] for item in json.loads(event.items)] == ["prod-tomato", "prod-onion"]

    def test_involves_both_parties_only(self):
        order = _order()
        assert order.involves("ven-001")
        assert order.involves("sup-001")
        assert not order.involves("ven-002")


class TestForwardTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "confirmed"),
            ("confirmed", "preparing"),
            ("preparing", "ready"),
            ("ready", "delivered"),
            ("pending", "cancelled"),
        ],
    )
    def test_next_step_allowed(self, current, target):
        order = _order_in(current)
        order.change_status(target)
        assert order.status == target

    def test_skipping_ahead_allowed(self):
        order = _order()
        order.change_status("delivered")
        assert order.status == "delivered"

    def test_same_status_is_no_op(self):
        order = _order_in("confirmed")
        order.change_status("confirmed")
        assert order.status == "confirmed"
        assert order._events == []

    def test_raises_status_changed(self):
        order = _order_in("pending")
        order.change_status("confirmed")
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "pending"
        assert event.status == "confirmed"


class TestRejectedTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("confirmed", "pending"),
            ("ready", "preparing"),
            ("confirmed", "cancelled"),
            ("delivered", "cancelled"),
            ("cancelled", "confirmed"),
            ("delivered", "ready"),
        ],
    )
    def test_rejected(self, current, target):
        order = _order_in(current)
        with pytest.raises(ValidationError) as exc:
            order.change_status(target)
        assert f"Cannot transition from {current} to {target}" in str(exc.value.messages)
        assert order.status == current

    def test_unknown_status(self):
        order = _order()
        with pytest.raises(ValidationError) as exc:
            order.change_status("shipped")
        assert exc.value.messages == {"status": ["Invalid status"]}
