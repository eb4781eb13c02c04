"""
Product Domain Model

Represents a catalog product as served by the storefront API.
This is the single source of truth for product data structure.

Author: TM3
Date: 2026-10-14
"""
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime


# Fields an administrator may change through the product tools
ALLOWED_UPDATE_FIELDS = ('name', 'price', 'description', 'image', 'brand', 'category', 'countInStock')


class Review(BaseModel):
    """
    Review domain model - one customer review embedded in a product

    Fields:
        rating: Star rating (1-5)
        comment: Free text
        name: Author display name (may be missing)
        created_at: When the review was written
    """

    rating: float = Field(0, description="Star rating", ge=0, le=5)
    comment: str = Field("", description="Review text")
    name: Optional[str] = Field(None, description="Author name")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @property
    def author(self) -> str:
        """Author name, falling back to Anonymous"""
        return self.name or 'Anonymous'

    def to_summary(self, now: datetime) -> dict:
        """Shape used by the review tools"""
        created_at = self.created_at or now
        return {
            "rating": self.rating,
            "comment": self.comment,
            "userName": self.author,
            "createdAt": created_at.isoformat(),
        }


class Product(BaseModel):
    """
    Product domain model - represents a product in the storefront catalog

    Fields:
        id: Storefront product ID (``_id`` on the wire)
        name: Product name
        price: Unit price in dollars
        description: Product description
        image: Image path or URL
        brand: Product brand
        category: Product category
        count_in_stock: Units available (never negative)
        rating: Average review rating
        num_reviews: Number of reviews
        reviews: Embedded reviews, oldest first
        created_at / updated_at: Server timestamps

    Unknown server fields are kept so a full product round-trips.
    """

    id: Optional[str] = Field(None, alias="_id", description="Storefront product ID")
    name: str = Field("", description="Product name")
    price: float = Field(0, description="Unit price", ge=0)
    description: Optional[str] = Field(None, description="Product description")
    image: Optional[str] = Field(None, description="Image path or URL")
    brand: Optional[str] = Field(None, description="Product brand")
    category: Optional[str] = Field(None, description="Product category")
    count_in_stock: int = Field(0, description="Units in stock", ge=0)
    rating: float = Field(0, description="Average rating", ge=0)
    num_reviews: int = Field(0, description="Number of reviews", ge=0)
    reviews: List[Review] = Field(default_factory=list, description="Customer reviews")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    # Pydantic v2 configuration
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    # Computed properties
    @property
    def in_stock(self) -> bool:
        return self.count_in_stock > 0

    @property
    def stock_status(self) -> str:
        return 'In Stock' if self.in_stock else 'Out of Stock'

    def to_dict(self) -> dict:
        """Convert to the storefront's JSON shape"""
        return self.model_dump(by_alias=True, mode="json")


def merge_product_update(product_id: str, current: dict, updates: dict) -> dict:
    """
    Build the full replacement body for ``PUT /api/products/:id``.

    Each allow-listed field is taken from ``updates`` when the caller passed
    the key, otherwise from the current server representation.
    """
    merged: Dict[str, Any] = {"productId": product_id}
    for field in ALLOWED_UPDATE_FIELDS:
        merged[field] = updates[field] if field in updates else current.get(field)
    return merged


def invalid_update_fields(updates: dict) -> List[str]:
    """Keys of ``updates`` outside the allow-list, in the order given"""
    return [field for field in updates if field not in ALLOWED_UPDATE_FIELDS]
