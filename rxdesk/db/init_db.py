# rxdesk/db/init_db.py
from __future__ import annotations

import argparse
import logging

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from rxdesk.db.base import Base
from rxdesk.db.session import engine, SessionLocal
from rxdesk.models import MiscItem  # noqa: F401  (registers all tables)

logger = logging.getLogger(__name__)

DEFAULT_VOCABULARY = {
    "dose": ["1 tab", "2 tab", "5 ml", "10 ml", "1 cap"],
    "frequency": ["1-0-0", "0-0-1", "1-0-1", "1-1-1", "SOS"],
    "day": ["3", "5", "7", "10", "15", "30"],
    "remarks": ["After food", "Before food", "At bedtime"],
}


def create_tables(bind: Engine = engine) -> None:
    Base.metadata.create_all(bind=bind)


def seed_vocabulary(db: Session) -> int:
    """
    Seed ONLY missing vocabulary rows; safe to run multiple times.
    """
    existing = {(t, n) for t, n in db.execute(
        select(MiscItem.type, MiscItem.name)).all()}
    added = 0
    for typ, names in DEFAULT_VOCABULARY.items():
        for name in names:
            if (typ, name) in existing:
                continue
            db.add(MiscItem(type=typ, name=name))
            added += 1
    db.commit()
    return added


def main() -> None:
    parser = argparse.ArgumentParser(description="Create RxDesk tables")
    parser.add_argument("--seed",
                        action="store_true",
                        help="also seed default dose/frequency/day/remarks")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    create_tables()
    logger.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))

    if args.seed:
        db = SessionLocal()
        try:
            logger.info("Seeded %d vocabulary rows", seed_vocabulary(db))
        finally:
            db.close()


if __name__ == "__main__":
    main()
