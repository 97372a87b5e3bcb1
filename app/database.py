"""
Database Connection and Session Management
Async queries through `databases`, SQLAlchemy models for schema and migrations
"""

import logging
import sqlite3

from asyncpg.exceptions import UniqueViolationError
from databases import Database
from sqlalchemy import create_engine, MetaData
from sqlalchemy.orm import declarative_base
from app.config import settings

logger = logging.getLogger(__name__)

# Database URL
DATABASE_URL = settings.DATABASE_URL

# For Supabase connection pooler (pgbouncer), disable prepared statements
if "supabase.com" in DATABASE_URL or "pooler.supabase.com" in DATABASE_URL:
    db_options = {"min_size": 1, "max_size": 5, "statement_cache_size": 0}
elif DATABASE_URL.startswith("postgresql"):
    db_options = {"min_size": 1, "max_size": 10}
else:
    # aiosqlite takes no pool options
    db_options = {}

# Create database instance for async queries
database = Database(DATABASE_URL, **db_options)

# Create SQLAlchemy engine for migrations and scripts
engine = create_engine(
    DATABASE_URL.replace("postgresql://", "postgresql+psycopg2://")
    if "postgresql://" in DATABASE_URL else DATABASE_URL
)

# Driver errors raised when an INSERT hits a unique constraint
UNIQUE_VIOLATIONS = (sqlite3.IntegrityError, UniqueViolationError)

# Metadata for models
metadata = MetaData()

# Base class for models
Base = declarative_base(metadata=metadata)


async def connect_db():
    """Connect to database on startup"""
    await database.connect()
    logger.info("[OK] Database connected")


async def disconnect_db():
    """Disconnect from database on shutdown"""
    await database.disconnect()
    logger.info("[OK] Database disconnected")


def create_tables():
    """Create all tables from the SQLAlchemy models"""
    import app.models  # noqa: F401  registers every table on metadata

    metadata.create_all(bind=engine)
