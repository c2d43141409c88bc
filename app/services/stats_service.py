# app/services/stats_service.py
from sqlmodel import Session

from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import OrderStatistics, OrderStats, StatusCount


class StatsService:
    """
    Orchestrates aggregated order statistics for admins.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_order_stats(self, session: Session) -> OrderStats:
        """Revenue and average cover non-cancelled orders only; the count covers every order."""
        total_orders = self.repo.count_orders(session)
        total_revenue, average = self.repo.revenue_and_average(session)

        status_distribution: list[StatusCount] = []
        for status, count in self.repo.status_counts(session):
            status_distribution.append(StatusCount(status=status, count=count))

        return OrderStats(
            statistics=OrderStatistics(
                total_orders=total_orders,
                total_revenue=round(total_revenue, 2),
                average_order_value=round(average, 2),
            ),
            status_distribution=status_distribution,
        )
