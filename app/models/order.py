# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order.

    Everything except status (and updated_at) is fixed at creation:
      - shipping address is copied from the checkout payload
      - payment_amount is the server-computed total
      - transaction_id is generated and unique
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # Pending | Processing | Shipped | Delivered | Cancelled
    status: str = Field(
        default="Pending",
        index=True,
        description="Order status lifecycle",
    )

    shipping_address: str
    shipping_city: str
    shipping_zip_code: str

    # Credit Card | COD | PayPal | Bank Transfer
    payment_method: str
    payment_amount: float = Field(
        ge=0,
        description="Sum of price * quantity over all items",
    )
    transaction_id: str = Field(unique=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order, with the unit price captured at order time.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    # Variant SKU
    variant_id: str

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: float = Field(
        ge=0,
        description="Unit price at time of order",
    )

    # Index of the line in the originating cart
    position: int = Field(default=0, ge=0)
