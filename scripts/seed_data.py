#!/usr/bin/env python
"""
Seed script to populate the database with the demo portfolio for local development.

Usage:
    python scripts/seed_data.py --database-url sqlite:///./rentaltrust.db
"""

import argparse
import sys
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rentaltrust.config import Base, settings  # noqa: E402
from rentaltrust.core.logging import configure_logging  # noqa: E402
from rentaltrust.models import models as _all_models  # noqa: E402,F401
from rentaltrust.services.seed import DEMO_PASSWORD, seed_demo_data  # noqa: E402
from rentaltrust.services.storage import build_storage  # noqa: E402


def seed_database(database_url: str) -> None:
    engine = create_engine(database_url)
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    storage = build_storage("database", session_factory=session_factory)
    created = seed_demo_data(storage)
    engine.dispose()
    if created:
        print(f"Seed complete. Log in as 'landlord' or 'tenant' (password: '{DEMO_PASSWORD}').")
    else:
        print("Demo data already present; nothing to do.")


def main():
    parser = argparse.ArgumentParser(description="Seed the RentalTrust database with demo data.")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy database URL to seed")
    args = parser.parse_args()
    configure_logging(settings.log_level, settings.log_json)
    seed_database(args.database_url)


if __name__ == "__main__":
    main()
