"""Repository for the Product aggregate."""

from caffinity.catalogue.product import Product
from caffinity.domain import caffinity


@caffinity.repository(part_of=Product)
class ProductRepository:
    def list_all(self) -> list[Product]:
        return self._dao.query.all().items

    def find_by_category(self, category: str) -> list[Product]:
        return self._dao.query.filter(category=category).all().items
