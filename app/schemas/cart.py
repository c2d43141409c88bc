# app/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CartLine(SQLModel):
    """
    Identifies one (product, variant) line and its quantity.
    Used for both add and update.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    variant_id: str
    quantity: int = Field(default=1, ge=1)

    @field_validator("variant_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("variant_id cannot be empty")
        return v


class CartItemProduct(SQLModel):
    """
    Product details joined onto a cart line for display.
    """

    name: str
    price: float
    image_url: str | None = None
    size: str | None = None
    color: str | None = None
    stock: int | None = None


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    product is None when the product was removed from the catalog.
    """

    product_id: uuid.UUID
    variant_id: str
    quantity: int
    product: CartItemProduct | None = None
    line_total: float


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    items: list[CartItemRead]
    total_quantity: int
    total_price: float
    updated_at: datetime


class CartResponse(SQLModel):
    message: str
    cart: CartRead
