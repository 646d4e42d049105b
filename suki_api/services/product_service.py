"""
==============================================================================
Product Query Service Module
==============================================================================

Read-only listing and per-store filtering over the product catalog.

The service only talks to a ProductRepository, so it behaves the same over
the in-memory sample catalog and the hosted products table.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional

from suki_api.catalog.models import Product
from suki_api.catalog.repository import ProductRepository
from suki_api.utils.validators import StoreIdParser


# Module logger
logger = logging.getLogger(__name__)


class ProductQueryService:
    """
    Query service for catalog products.

    Example:
        >>> service = ProductQueryService(InMemoryProductRepository())
        >>> len(service.list_all())
        3
        >>> len(service.list_by_store(1))
        2
        >>> service.list_by_store(99)
        []
    """

    def __init__(
        self,
        repository: ProductRepository,
        parser: StoreIdParser = None
    ) -> None:
        self._repository = repository
        self._parser = parser or StoreIdParser()

    def list_all(self) -> List[Product]:
        """Return every product. No ordering contract."""
        products = self._repository.list_all()
        logger.debug(f"Listed {len(products)} products")
        return products

    def list_by_store(self, store_id: Optional[int]) -> List[Product]:
        """
        Return the products of one store.

        Args:
            store_id: Store identifier; None is the unparseable sentinel

        Returns:
            Matching products, empty when the store has none or does not
            exist
        """
        if store_id is None:
            return []

        products = self._repository.list_by_store(store_id)
        logger.debug(f"Store {store_id}: {len(products)} products")
        return products

    def list_by_raw_store_id(self, raw_store_id: str) -> List[Product]:
        """
        Parse a store identifier from a URL path and list its products.

        A non-numeric identifier yields an empty list, not an error.
        """
        store_id = self._parser.parse(raw_store_id)

        if store_id is None:
            logger.warning(f"Unparseable store id {raw_store_id!r}, returning no products")

        return self.list_by_store(store_id)
