"""Repository for the GroupOrder aggregate."""

from marketplace.domain import marketplace
from marketplace.group_buying.group_order import GroupOrder, GroupOrderStatus
from marketplace.shared.queries import fetch_all


@marketplace.repository(part_of=GroupOrder)
class GroupOrderRepository:
    def listed(self, status=None, supplier_id=None) -> list[GroupOrder]:
        """Group orders in ``status`` (open unless given), optionally for one supplier."""
        query = self._dao.query.filter(status=status or GroupOrderStatus.OPEN.value)
        if supplier_id:
            query = query.filter(supplier_id=str(supplier_id))
        return self._newest_first(fetch_all(query))

    def for_vendor(self, vendor_id) -> list[GroupOrder]:
        """Group orders the vendor created or joined, in any status."""
        group_orders = [g for g in fetch_all(self._dao.query) if g.involves(vendor_id)]
        return self._newest_first(group_orders)

    @staticmethod
    def _newest_first(group_orders) -> list[GroupOrder]:
        return sorted(group_orders, key=lambda g: g.created_at, reverse=True)
