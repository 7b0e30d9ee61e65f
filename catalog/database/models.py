# This file defines the relational schema used by the SQLite storage backend
# Products are unique by SKU; statistics get one appended row per run

from sqlalchemy import Column, Integer, String, Float, DateTime, func
from sqlalchemy.orm import declarative_base

# Create a base class for all ORM models
Base = declarative_base()


class ProductRow(Base):
    """A scraped product, stored once per SKU.

    The unique constraint on ``sku`` is what makes repeated runs against the
    same database insert-or-ignore: a product already present keeps its
    original row and timestamp.
    """
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    price = Column(String, default="", server_default="")
    availability = Column(String, default="", server_default="")
    brand = Column(String, default="", server_default="")
    product_category = Column(String, default="", server_default="")
    image_url = Column(String, default="", server_default="")
    product_url = Column(String, default="", server_default="")
    rating = Column(String, default="", server_default="")
    review_count = Column(String, default="", server_default="")

    # Filled in by the database at insert time
    created_at = Column(DateTime, server_default=func.current_timestamp())


class RunStatisticsRow(Base):
    """Statistics of one scrape run. Append-only."""

    __tablename__ = "statistics"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_url = Column(String, default="", server_default="")
    total_detected = Column(Integer, default=0, server_default="0")
    total_saved = Column(Integer, default=0, server_default="0")
    total_skipped = Column(Integer, default=0, server_default="0")
    missing_price = Column(Integer, default=0, server_default="0")
    started_at = Column(String, default="", server_default="")
    finished_at = Column(String, default="", server_default="")
    duration_seconds = Column(Float, default=0.0, server_default="0")
    created_at = Column(DateTime, server_default=func.current_timestamp())
