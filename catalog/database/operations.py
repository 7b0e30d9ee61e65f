# This file contains the database access layer for the SQLite storage backend
# It handles engine/session setup and the few write and read operations a run needs

from sqlalchemy import create_engine, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from typing import Generator, List
from pathlib import Path

from catalog.models import Product, RunStatistics
from .models import Base, ProductRow, RunStatisticsRow


def create_db_engine(db_path: str) -> Engine:
    """Create an engine for a local SQLite file, creating parent folders if needed."""
    parent = Path(db_path).parent
    if str(parent) not in ("", "."):
        parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}")


def init_db(engine: Engine) -> None:
    """Create database tables if they don't exist."""
    Base.metadata.create_all(bind=engine)


def get_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create and yield a database session.

    The session is closed even if an exception occurs while it is in use.

    Usage:
        for db in get_db(factory):
            count_products(db)
    """
    db = session_factory()
    try:
        yield db
    finally:
        # This ensures the session is closed even if an exception occurs
        db.close()


def insert_product_if_absent(db: Session, product: Product) -> bool:
    """Insert a product unless its SKU is already stored.

    Args:
        db: Database session
        product: Product to insert

    Returns:
        True if a new row was written, False if the SKU already existed.
    """
    statement = (
        sqlite_insert(ProductRow.__table__)
        .values(**product.model_dump())
        .on_conflict_do_nothing(index_elements=["sku"])
    )
    result = db.execute(statement)
    return result.rowcount > 0


def add_run_statistics(db: Session, statistics: RunStatistics) -> RunStatisticsRow:
    """Append the statistics of one run. Does not commit."""
    row = RunStatisticsRow(
        category_url=statistics.category_url,
        total_detected=statistics.total_detected,
        total_saved=statistics.total_saved,
        total_skipped=statistics.total_skipped,
        missing_price=statistics.missing_price,
        started_at=statistics.started_at,
        finished_at=statistics.finished_at,
        duration_seconds=statistics.duration_seconds,
    )
    db.add(row)  # Stage the new object for insertion
    return row


def count_products(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(ProductRow))


def get_recent_statistics(db: Session, limit: int = 10) -> List[RunStatisticsRow]:
    """Get the most recent run statistics, newest first.

    Args:
        db: Database session
        limit: Maximum number of rows to return
    """
    query = select(RunStatisticsRow).order_by(RunStatisticsRow.id.desc()).limit(limit)
    return list(db.scalars(query))
