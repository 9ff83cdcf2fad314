from sqlalchemy import Column, Integer, Float, String, Date, ForeignKey, Index

from salescast.db.session import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), nullable=False, unique=True)


class SalesTotalByCategory(Base):
    """Per-transaction, per-category net totals; refunds are negative."""

    __tablename__ = "sales_totals_by_category_dw"

    id = Column(Integer, primary_key=True, index=True)
    date_recorded = Column(Date, nullable=False, index=True)
    sale_transaction_id = Column(Integer, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    total_amount = Column(Float, nullable=False)


Index("idx_sales_totals_date_category", SalesTotalByCategory.date_recorded, SalesTotalByCategory.category_id)
