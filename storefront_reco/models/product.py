"""
Product model - the unit of recommendation
Mirrors the storefront catalog records
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    Catalog product

    `in_stock` is exchanged as `inStock` on the wire; both names are
    accepted on input.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    slug: str = ""
    price: float = Field(ge=0)
    rating: float = Field(ge=0, le=5)
    reviews: int = Field(ge=0)
    images: List[str] = Field(default_factory=list)
    description: str = ""
    features: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    in_stock: bool = Field(default=True, alias="inStock")

    @property
    def popularity_score(self) -> float:
        """Rating weighted by review volume"""
        return self.rating * self.reviews

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None
