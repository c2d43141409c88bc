# app/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field


def _round_price(v: float) -> float:
    return round(v, 2)


class VariantIn(SQLModel):
    """
    A purchasable SKU submitted with a product.
    """

    model_config = ConfigDict(extra="forbid")

    sku: str = Field(max_length=100)
    size: str = Field(max_length=50)
    color: str = Field(max_length=50)
    stock: int = Field(default=0, ge=0)

    @field_validator("sku", "size", "color")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class VariantRead(SQLModel):
    id: uuid.UUID
    sku: str
    size: str
    color: str
    stock: int


class ImageIn(SQLModel):
    model_config = ConfigDict(extra="forbid")

    url: str
    is_primary: bool = False

    @field_validator("url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty")
        return v


class ImageRead(SQLModel):
    id: uuid.UUID
    url: str
    is_primary: bool
    sort_order: int


def _check_unique_skus(variants: list[VariantIn] | None) -> None:
    if not variants:
        return
    seen: set[str] = set()
    for v in variants:
        if v.sku in seen:
            raise ValueError(f"duplicate sku in payload: {v.sku}")
        seen.add(v.sku)


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - price is rounded to 2 decimals
    - variant SKUs must be unique within the payload (and the catalog,
      checked in ProductService)
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    description: str
    price: float = Field(ge=0)
    categories: list[uuid.UUID] = []
    variants: list[VariantIn] = []
    images: list[ImageIn] = []

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("price")
    @classmethod
    def round_price(cls, v: float) -> float:
        return _round_price(v)

    @model_validator(mode="after")
    def unique_skus(self):
        _check_unique_skus(self.variants)
        return self


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional; list fields replace the stored lists.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    categories: list[uuid.UUID] | None = None
    variants: list[VariantIn] | None = None
    images: list[ImageIn] | None = None

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("price")
    @classmethod
    def round_price(cls, v: float | None) -> float | None:
        if v is None:
            return v
        return _round_price(v)

    @model_validator(mode="after")
    def unique_skus(self):
        _check_unique_skus(self.variants)
        return self


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: float
    categories: list[uuid.UUID]
    variants: list[VariantRead]
    images: list[ImageRead]
    created_at: datetime
    updated_at: datetime


class ProductPage(SQLModel):
    products: list[ProductRead]
    total: int
    total_pages: int
    current_page: int
