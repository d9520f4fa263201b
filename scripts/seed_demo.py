"""Create the schema and load the demo school into a database.

Usage:
  python -m scripts.seed_demo                                   # settings.database_url
  python -m scripts.seed_demo --database-url sqlite:///./demo.db
  python -m scripts.seed_demo --seed-file path/to/school.json
"""
import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app import models  # noqa: F401
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.db.database import Base
from app.services.seed_service import SEED_FILE, seed_demo_data


def main():
    parser = argparse.ArgumentParser(description="Load CampusDesk demo data")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy database URL")
    parser.add_argument("--seed-file", default=str(SEED_FILE), help="Seed JSON file")
    args = parser.parse_args()

    setup_logging()

    engine = create_engine(args.database_url)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    try:
        counts = seed_demo_data(session, Path(args.seed_file))
    finally:
        session.close()

    print(
        f"students={counts['students']} grade_configs={counts['grade_configs']} "
        f"grades={counts['grades']} attendance={counts['attendance']}"
    )


if __name__ == "__main__":
    main()
