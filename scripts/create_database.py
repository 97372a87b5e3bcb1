#!/usr/bin/env python
"""Create the database from `DATABASE_URL` in .env and build every table.

For PostgreSQL the database itself is created first when missing.
SQLite files are created on first connect.

Usage:
  python scripts/create_database.py [--password PASSWORD]
"""
import argparse
import os
import sys
from getpass import getpass

# Ensure project root is on sys.path so `app` package can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.engine import make_url

from app.config import settings
from app.database import create_tables


def ensure_postgres_database(url, password):
    import psycopg2
    from psycopg2 import sql, OperationalError

    def try_connect(pw):
        return psycopg2.connect(
            dbname="postgres",
            user=url.username,
            password=pw,
            host=url.host or "localhost",
            port=url.port or 5432,
        )

    try:
        conn = try_connect(password)
    except OperationalError:
        if not sys.stdin.isatty():
            print("Password authentication failed. Provide the password via --password or POSTGRES_PASSWORD env var.")
            sys.exit(1)
        print("Password authentication failed. Please enter the Postgres password for user:", url.username)
        conn = try_connect(getpass())

    conn.autocommit = True
    cur = conn.cursor()
    cur.execute("SELECT 1 FROM pg_database WHERE datname=%s", (url.database,))
    if cur.fetchone():
        print(f"Database '{url.database}' already exists.")
    else:
        cur.execute(sql.SQL("CREATE DATABASE {};").format(sql.Identifier(url.database)))
        print(f"Database '{url.database}' created.")
    cur.close()
    conn.close()


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--password", "-p", help="Postgres admin password")
    args = parser.parse_args()

    url = make_url(settings.DATABASE_URL)
    if not url.database:
        print("No database name found in DATABASE_URL")
        sys.exit(1)

    if url.get_backend_name() == "postgresql":
        ensure_postgres_database(url, args.password or os.getenv("POSTGRES_PASSWORD") or url.password)

    create_tables()
    print("Tables created.")


if __name__ == "__main__":
    main()
