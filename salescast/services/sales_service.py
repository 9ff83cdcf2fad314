from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from salescast.db.models import Category, SalesTotalByCategory
from salescast.db.schemas import CategoryTotal


class SalesRepository:
    def category_totals(self, db: Session, start: date, end: date) -> dict[str, list[CategoryTotal]]:
        """Net sales per day and category between ``start`` and ``end`` inclusive."""
        q = (
            select(
                SalesTotalByCategory.date_recorded,
                Category.name,
                func.sum(SalesTotalByCategory.total_amount).label("total_amount"),
            )
            .join(Category, SalesTotalByCategory.category_id == Category.id)
            .where(SalesTotalByCategory.date_recorded >= start, SalesTotalByCategory.date_recorded <= end)
            .group_by(SalesTotalByCategory.date_recorded, Category.name)
            .order_by(SalesTotalByCategory.date_recorded, Category.name)
        )
        result: dict[str, list[CategoryTotal]] = {}
        for day, name, total in db.execute(q).all():
            result.setdefault(day.isoformat(), []).append(
                CategoryTotal(category_name=name, total_amount=float(total or 0))
            )
        return result
