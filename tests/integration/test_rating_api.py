"""Integration tests for rating endpoints."""

import json

import pytest
from marketplace.ordering.placement import PlaceOrder
from marketplace.ordering.status import UpdateOrderStatus
from protean import current_domain


def _place_order(vendor_id, supplier_id, product_id):
    return current_domain.process(
        PlaceOrder(
            vendor_id=vendor_id,
            supplier_id=supplier_id,
            items=json.dumps([{"product_id": product_id, "quantity": 10}]),
            delivery_address="Stall 12, Connaught Place, Delhi",
        ),
        asynchronous=False,
    )


@pytest.fixture()
def delivered_order_id(vendor_id, supplier_id, product_id):
    order_id = _place_order(vendor_id, supplier_id, product_id)
    current_domain.process(
        UpdateOrderStatus(supplier_id=supplier_id, order_id=order_id, status="delivered"),
        asynchronous=False,
    )
    return order_id


class TestCreateRatingEndpoint:
    def test_rate_delivered_order(self, client, as_user, vendor_id, supplier_id, delivered_order_id):
        response = client.post(
            "/api/ratings",
            json={"orderId": delivered_order_id, "supplierId": supplier_id, "rating": 5, "comment": "Very fresh"},
            headers=as_user(vendor_id),
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["rating"] == 5
        assert data["supplier"]["rating"] == 5.0
        assert data["supplier"]["totalRatings"] == 1

    def test_undelivered_order_returns_409(self, client, as_user, vendor_id, supplier_id, product_id):
        order_id = _place_order(vendor_id, supplier_id, product_id)
        response = client.post(
            "/api/ratings",
            json={"orderId": order_id, "supplierId": supplier_id, "rating": 5},
            headers=as_user(vendor_id),
        )
        assert response.status_code == 409
        assert response.json()["error"] == "You can only rate delivered orders"

    def test_out_of_range_returns_400(self, client, as_user, vendor_id, supplier_id, delivered_order_id):
        response = client.post(
            "/api/ratings",
            json={"orderId": delivered_order_id, "supplierId": supplier_id, "rating": 0},
            headers=as_user(vendor_id),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Rating must be between 1 and 5"


class TestReadRatingEndpoints:
    def test_supplier_ratings_are_public(self, client, as_user, vendor_id, supplier_id, delivered_order_id):
        client.post(
            "/api/ratings",
            json={"orderId": delivered_order_id, "supplierId": supplier_id, "rating": 4},
            headers=as_user(vendor_id),
        )
        response = client.get(f"/api/ratings/supplier/{supplier_id}")
        assert response.status_code == 200
        ratings = response.json()["data"]
        assert len(ratings) == 1
        assert ratings[0]["vendor"]["id"] == vendor_id

    def test_unknown_supplier_returns_404(self, client, vendor_id):
        assert client.get("/api/ratings/supplier/nobody").status_code == 404
        assert client.get(f"/api/ratings/supplier/{vendor_id}").status_code == 404

    def test_vendor_ratings(self, client, as_user, vendor_id, supplier_id, delivered_order_id):
        client.post(
            "/api/ratings",
            json={"orderId": delivered_order_id, "supplierId": supplier_id, "rating": 3},
            headers=as_user(vendor_id),
        )
        response = client.get("/api/ratings/vendor", headers=as_user(vendor_id))
        ratings = response.json()["data"]
        assert [r["supplier"]["id"] for r in ratings] == [supplier_id]

    def test_vendor_ratings_forbidden_for_supplier(self, client, as_user, supplier_id):
        response = client.get("/api/ratings/vendor", headers=as_user(supplier_id))
        assert response.status_code == 403
