"""Pydantic models for catalog records.

Field names follow the document schema used by the storefront frontend
(``_id``, ``isFeatured``), exposed in Python under snake_case names.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    """Request body for creating a product.

    No field is required and values are not coerced: whatever JSON value a
    client sends is passed through to the store as-is, and unset fields are
    left out.

    Attributes:
        image: Either an image payload (data URI or remote URL) to upload to
            the image host, or a local ``/uploads/...`` path to keep as-is.
    """

    name: Optional[Any] = Field(default=None, description="Product name")
    description: Optional[Any] = Field(default=None, description="Product description")
    price: Optional[Any] = Field(default=None, description="Unit price")
    category: Optional[Any] = Field(default=None, description="Category slug")
    image: Optional[Any] = Field(default=None, description="Image payload or local path")


class Product(BaseModel):
    """A product record as stored in the catalog.

    Descriptive fields are untyped because create stores client values
    uncoerced; a record with a text price must still be readable.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Identifier assigned by the store")
    name: Optional[Any] = None
    description: Optional[Any] = None
    price: Optional[Any] = None
    category: Optional[Any] = None
    image: Optional[str] = ""
    is_featured: bool = Field(default=False, alias="isFeatured")

    def to_record(self) -> Dict[str, Any]:
        """Dump to the JSON-ready dict returned to callers."""
        return self.model_dump(by_alias=True)


class RecommendedProduct(BaseModel):
    """Projection of a product served as a recommendation.

    Recommendations never expose category or featured status.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: Optional[Any] = None
    description: Optional[Any] = None
    price: Optional[Any] = None
    image: Optional[str] = ""

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# Fields projected by the recommendation sample
RECOMMENDATION_FIELDS = ("_id", "name", "description", "image", "price")
