import logging

import sqlalchemy.exc

from catalog.database.operations import (
    add_run_statistics,
    create_db_engine,
    get_session_factory,
    init_db,
    insert_product_if_absent,
)
from catalog.models import ScrapeBundle
from catalog.storage.base import BaseStorage


class SqliteStorage(BaseStorage):
    """Stores products and run statistics in a local SQLite database.

    Products are insert-or-ignore by SKU, so saving the same products twice
    leaves the products table unchanged. Every save appends one statistics row.
    """

    def __init__(self, db_path: str = "productos.db"):
        self.db_path = db_path
        self.engine = create_db_engine(db_path)
        self.session_factory = get_session_factory(self.engine)
        self.logger = logging.getLogger("storage.sqlite")
        # Counts from the most recent save()
        self.last_inserted = 0
        self.last_existing = 0

    @property
    def location(self) -> str:
        return self.db_path

    def save(self, bundle: ScrapeBundle) -> bool:
        db = None
        try:
            init_db(self.engine)
            db = self.session_factory()

            add_run_statistics(db, bundle.statistics)

            inserted = 0
            existing = 0
            for product in bundle.products:
                if insert_product_if_absent(db, product):
                    inserted += 1
                else:
                    existing += 1

            db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            if db is not None:
                db.rollback()
            self.logger.error("Could not save to database %s: %s", self.db_path, str(e))
            return False
        finally:
            if db is not None:
                db.close()

        self.last_inserted = inserted
        self.last_existing = existing
        self.logger.info("[DB] Saved: %d | Already present: %d", inserted, existing)
        return True
