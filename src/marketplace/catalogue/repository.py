"""Repository for the Product aggregate."""

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.shared.queries import fetch_all


@marketplace.repository(part_of=Product)
class ProductRepository:
    def search(self, supplier_id=None, category=None) -> list[Product]:
        """Products of one supplier and/or whose category contains ``category`` (any case)."""
        query = self._dao.query
        if supplier_id:
            query = query.filter(supplier_id=str(supplier_id))

        products = fetch_all(query)
        if category:
            needle = category.lower()
            products = [p for p in products if needle in (p.category or "").lower()]

        return sorted(products, key=lambda p: p.created_at, reverse=True)

    def for_supplier(self, supplier_id) -> list[Product]:
        return self.search(supplier_id=supplier_id)
