# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Stock is not tracked here: every purchasable SKU is a ProductVariant
    with its own stock count.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        description="Long description shown on the product page",
    )

    price: float = Field(
        ge=0,
        description="Unit price, 2 decimals",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductVariant(SQLModel, table=True):
    """
    A purchasable size/color combination of a product.

    sku is unique across the whole catalog and is what carts and orders
    use as variant_id.
    """

    __tablename__ = "product_variants"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    sku: str = Field(unique=True, index=True, max_length=100)
    size: str
    color: str

    stock: int = Field(
        default=0,
        ge=0,
        description="Units currently in stock, never negative",
    )


class ProductImage(SQLModel, table=True):
    """
    Image attached to a product.
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    url: str

    is_primary: bool = Field(default=False)

    sort_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the gallery",
    )


class ProductCategoryLink(SQLModel, table=True):
    """Many-to-many link between products and categories."""

    __tablename__ = "product_categories"

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        primary_key=True,
    )
    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        primary_key=True,
        index=True,
    )
