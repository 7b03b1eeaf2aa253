"""Repository for the Order aggregate."""

from marketplace.accounts.user import User
from marketplace.domain import marketplace
from marketplace.ordering.order import Order
from marketplace.shared.queries import fetch_all


@marketplace.repository(part_of=Order)
class OrderRepository:
    def placed_by(self, vendor_id) -> list[Order]:
        return self._newest_first(self._dao.query.filter(vendor_id=str(vendor_id)))

    def received_by(self, supplier_id) -> list[Order]:
        return self._newest_first(self._dao.query.filter(supplier_id=str(supplier_id)))

    def visible_to(self, user: User) -> list[Order]:
        """Orders a vendor placed, or orders a supplier received."""
        if user.is_vendor:
            return self.placed_by(user.id)
        if user.is_supplier:
            return self.received_by(user.id)
        return []

    def _newest_first(self, query) -> list[Order]:
        return sorted(fetch_all(query), key=lambda o: o.created_at, reverse=True)
