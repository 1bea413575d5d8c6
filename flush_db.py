#!/usr/bin/env python3
"""
Full database reset - drops all tables and recreates them.
WARNING: This destroys ALL data including users, customers, work orders and
invoices. No account is created afterwards; run create_admin.py.

Execute from the project directory:
    python flush_db.py
"""

import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from spartec.database import engine, Base
from spartec import models  # noqa: F401  registers the tables with Base


def flush_database():
    print("=" * 60)
    print("FULL DATABASE RESET")
    print("=" * 60)
    print(f"\nDatabase: {engine.url.render_as_string(hide_password=True)}")
    print("\nWARNING: This will DELETE ALL DATA in the database!")
    print("This includes: users, customers, materials, work orders, invoices, projects.\n")

    confirm = input("Type 'YES' to confirm full database reset: ")
    if confirm != "YES":
        print("Aborted. No changes made.")
        return

    print("\nDropping all tables...")
    for table in reversed(Base.metadata.sorted_tables):
        print(f"  Dropping {table.name}")
    Base.metadata.drop_all(bind=engine)
    print("✓ All tables dropped")

    print("\nRecreating all tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ All tables created")

    print("\n" + "=" * 60)
    print("DATABASE RESET COMPLETE!")
    print("=" * 60)
    print("\nRun 'python create_admin.py' to create the first administrator,")
    print("then restart your FastAPI server.")


if __name__ == "__main__":
    flush_database()
