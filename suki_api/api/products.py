"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Read-only catalog listing, whole or per store.

==============================================================================
"""

from typing import List

from fastapi import APIRouter, Depends

from suki_api.catalog.models import Product
from suki_api.core.dependencies import get_product_service
from suki_api.core.exceptions import fault_boundary
from suki_api.services.product_service import ProductQueryService


router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[Product])
async def list_products(service: ProductQueryService = Depends(get_product_service)):
    """List every product."""
    with fault_boundary("List products"):
        return service.list_all()


@router.get("/{store_id}", response_model=List[Product])
async def list_store_products(
    store_id: str,
    service: ProductQueryService = Depends(get_product_service)
):
    """
    List the products of one store.

    Unknown stores and non-numeric ids both give an empty list.
    """
    with fault_boundary(f"List products for store {store_id!r}"):
        return service.list_by_raw_store_id(store_id)
