"""Catalog Models - Pydantic models for products from the catalog API."""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from storefront.services.money import to_decimal as _to_decimal


class Product(BaseModel):
    """Purchasable item as listed by the catalog."""
    model_config = ConfigDict(extra="ignore")  # rating and other fields are not used

    id: int
    title: str
    price: Decimal
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)
