"""
==============================================================================
Product Models Module
==============================================================================

Pydantic model for catalog products.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    Sellable item belonging to exactly one store.

    Serialized with the API field names: ``id``, ``storeId``, ``name``,
    ``price``, ``image_url``, ``description``.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        frozen=True,
    )

    id: int = Field(..., description="Unique product ID")
    store_id: int = Field(..., alias="storeId", description="Owning store ID")
    name: str = Field(..., min_length=1, description="Product name")
    price: float = Field(..., ge=0, description="Unit price")
    image_url: str = Field(default="", description="Product image URL")
    description: str = Field(default="", description="Product description")

    @classmethod
    def from_record(cls, record) -> "Product":
        """Build a Product from a ``ProductRecord`` row."""
        return cls(
            id=record.id,
            store_id=record.store_id,
            name=record.product_name,
            price=record.price,
            image_url=record.product_image or "",
            description=record.description or "",
        )
