# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]
PaymentMethod = Literal["Credit Card", "COD", "PayPal", "Bank Transfer"]
OrderSortField = Literal["created_at", "updated_at", "status", "payment_amount"]
SortOrder = Literal["asc", "desc"]


class ShippingAddress(SQLModel):
    model_config = ConfigDict(extra="forbid")

    address: str = Field(max_length=255)
    city: str = Field(max_length=100)
    zip_code: str = Field(max_length=20)

    @field_validator("address", "city", "zip_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class PaymentIn(SQLModel):
    """
    Payment descriptor submitted at checkout.

    `amount` is accepted for compatibility but always replaced by the
    server-computed total.
    """

    model_config = ConfigDict(extra="forbid")

    method: PaymentMethod
    amount: float | None = None


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - shipping address
      - payment method

    Backend derives:
      - user_id from token
      - items and unit prices from cart + catalog
      - payment amount and transaction id
      - status = 'Pending'
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress
    payment: PaymentIn


class PaymentRead(SQLModel):
    method: PaymentMethod
    amount: float
    transaction_id: str


class OrderItemRead(SQLModel):
    product_id: uuid.UUID
    variant_id: str
    quantity: int
    price: float
    line_total: float


class OrderRead(SQLModel):
    """
    Full order view including items.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    status: OrderStatus
    items: list[OrderItemRead]
    shipping_address: ShippingAddress
    payment: PaymentRead
    total_amount: float
    created_at: datetime
    updated_at: datetime


class OrderCreated(SQLModel):
    message: str
    order: OrderRead


class OrderPage(SQLModel):
    orders: list[OrderRead]
    total: int
    total_pages: int
    current_page: int


class AdminOrderPage(OrderPage):
    total_orders: int
    total_revenue: float


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class OrderStatusUpdated(SQLModel):
    message: str
    order: OrderRead
