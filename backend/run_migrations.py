"""Create the database schema for the configured DATABASE_URL.

Tables are created from the SQLModel metadata; existing tables are left
untouched, so the script is safe to run repeatedly.
"""
import sys
from pathlib import Path

BASE = Path(__file__).parent
if str(BASE) not in sys.path:
    sys.path.insert(0, str(BASE))

from requalify.config import settings  # noqa: E402
from requalify.database import create_db_and_tables, engine  # noqa: E402


def run():
    """Create every table registered on the metadata."""
    print("Using database:", settings.DATABASE_URL)
    create_db_and_tables(engine)
    print("Tables created.")


if __name__ == '__main__':
    run()
