"""Repository for the Rating aggregate."""

from marketplace.domain import marketplace
from marketplace.ratings.rating import Rating
from marketplace.shared.queries import fetch_all


@marketplace.repository(part_of=Rating)
class RatingRepository:
    def for_supplier(self, supplier_id) -> list[Rating]:
        return self._newest_first(self._dao.query.filter(supplier_id=str(supplier_id)))

    def by_vendor(self, vendor_id) -> list[Rating]:
        return self._newest_first(self._dao.query.filter(vendor_id=str(vendor_id)))

    def _newest_first(self, query) -> list[Rating]:
        return sorted(fetch_all(query), key=lambda r: r.created_at, reverse=True)
