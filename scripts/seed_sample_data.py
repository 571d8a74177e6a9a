#!/usr/bin/env python3
import argparse

from backend.app.db import Database, get_db_path
from backend.app.logging_setup import setup_logging
from backend.tracker.seed import clear_tables, seed_sample_data

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--db-path", default=None, help="SQLite file (default: from DATABASE_URL)")
    ap.add_argument("--reset", action="store_true", help="Clear all tables before seeding")
    args = ap.parse_args()

    setup_logging()

    db = Database(args.db_path or get_db_path())
    db.open()

    with db.transaction() as conn:
        if args.reset:
            clear_tables(conn)
        seeded = seed_sample_data(conn)

    db.close()
    print("Seeding complete." if seeded else "Database already has users, nothing seeded.")

if __name__ == "__main__":
    main()
