# app/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order

CANCELLED = "Cancelled"


class StatsRepository:
    """
    Read-only aggregated queries for the admin order statistics.
    """

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def revenue_and_average(self, session: Session) -> tuple[float, float]:
        """
        Sum and mean of payment_amount over non-cancelled orders.
        """
        stmt = select(
            func.coalesce(func.sum(Order.payment_amount), 0.0),
            func.coalesce(func.avg(Order.payment_amount), 0.0),
        ).where(Order.status != CANCELLED)
        total, average = session.exec(stmt).one()
        return float(total or 0.0), float(average or 0.0)

    def status_counts(self, session: Session) -> list[tuple[str, int]]:
        """
        Number of orders per status.
        """
        stmt = (
            select(Order.status, func.count(Order.id))
            .group_by(Order.status)
            .order_by(Order.status)
        )
        return [(status, int(count)) for status, count in session.exec(stmt).all()]
