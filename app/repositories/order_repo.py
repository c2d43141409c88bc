# app/repositories/order_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, update
from sqlmodel import Session, select

from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here; order creation and cancellation are multi-step
        transactions. The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def _filtered(
        self,
        stmt,
        user_id: uuid.UUID | None = None,
        status: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ):
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        if from_date is not None and to_date is not None:
            stmt = stmt.where(Order.created_at >= from_date, Order.created_at <= to_date)
        return stmt

    def list_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 10,
        *,
        user_id: uuid.UUID | None = None,
        status: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[Order]:
        column = getattr(Order, sort_by)
        stmt = self._filtered(select(Order), user_id, status, from_date, to_date)
        stmt = (
            stmt.order_by(column.desc() if descending else column.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count(
        self,
        session: Session,
        *,
        user_id: uuid.UUID | None = None,
        status: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(Order), user_id, status, from_date, to_date
        )
        return int(session.exec(stmt).one() or 0)

    def sum_amount(
        self,
        session: Session,
        *,
        status: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> float:
        stmt = self._filtered(
            select(func.coalesce(func.sum(Order.payment_amount), 0.0)),
            None,
            status,
            from_date,
            to_date,
        )
        return float(session.exec(stmt).one() or 0.0)

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_for_user(
        self,
        session: Session,
        order_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Order | None:
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        return session.exec(stmt).first()

    def add_order(self, session: Session, order: Order, items: list[OrderItem]) -> None:
        """
        Stage an Order with its items, without committing.
        """
        session.add(order)
        session.flush()  # Assign PK
        for item in items:
            item.order_id = order.id
        session.add_all(items)
        session.flush()

    def claim_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        current: str,
        new: str,
    ) -> bool:
        """
        Move an order from `current` to `new` in one conditional UPDATE.

        Returns False (nothing changed) when the stored status is no longer
        `current`. Does not commit.
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == current)
            .values(status=new, updated_at=datetime.now(timezone.utc))
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1

    # ---- Order items ----

    def list_items(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.position)
        )
        return list(session.exec(stmt).all())

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, list[OrderItem]]:
        grouped: dict[uuid.UUID, list[OrderItem]] = {oid: [] for oid in order_ids}
        if not order_ids:
            return grouped
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.position)
        )
        for item in session.exec(stmt).all():
            grouped[item.order_id].append(item)
        return grouped
