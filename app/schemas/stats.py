# app/schemas/stats.py
from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.order import OrderStatus


class OrderStatistics(SQLModel):
    """
    Totals over all non-cancelled orders (count covers every order).
    """
    model_config = ConfigDict(extra="forbid")

    total_orders: int
    total_revenue: float
    average_order_value: float


class StatusCount(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
    count: int


class OrderStats(SQLModel):
    """
    Full payload for the admin order statistics endpoint.
    """
    model_config = ConfigDict(extra="forbid")

    statistics: OrderStatistics
    status_distribution: list[StatusCount]
