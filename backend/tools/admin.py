"""Admin edits to the product collection, persisted as the managed override."""
import logging

from errors import DuplicateProductError
from models import Product
from session import CatalogSession

logger = logging.getLogger(__name__)


class CatalogAdmin:
    def __init__(self, session: CatalogSession):
        self.session = session

    def list_products(self) -> list[Product]:
        return list(self.session.products)

    def upsert(self, product: Product, original_name: str | None = None) -> bool:
        """
        Replace the product with the same name in place, or prepend it when
        the name is new. `original_name` lets an edit rename a product.
        Returns False if the change could not be persisted.
        """
        products = list(self.session.products)
        existing = _index_of(products, product.name)

        if original_name and original_name != product.name:
            renamed = _index_of(products, original_name)
            if renamed is not None:
                if existing is not None:
                    raise DuplicateProductError(f"A product named '{product.name}' already exists")
                existing = renamed

        if existing is None:
            products.insert(0, product)
        else:
            products[existing] = product

        logger.info(f"Admin saved product '{product.name}'")
        return self._commit(products)

    def remove(self, name: str) -> bool:
        products = [p for p in self.session.products if p.name != name]
        logger.info(f"Admin removed product '{name}'")
        return self._commit(products)

    def _commit(self, products: list[Product]) -> bool:
        self.session.products = products
        self.session.touch()
        return self.session.store.save_managed_products(products)


def _index_of(products: list[Product], name: str) -> int | None:
    return next((i for i, p in enumerate(products) if p.name == name), None)
