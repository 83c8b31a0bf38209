#!/usr/bin/env python3
"""
Database initialization script for ORDERDESK backend.

This script handles:
- Database creation (for PostgreSQL)
- Running Alembic migrations
- Optional initial data seeding (admin user, demo products)

Usage:
    python scripts/init_db.py [--seed-data] [--check-only]
"""

import os
import sys
import argparse
import subprocess
from pathlib import Path
from urllib.parse import urlparse

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from orderdesk.core.config import settings
from orderdesk.db.session import engine, SessionLocal
from sqlalchemy import create_engine, text
import logging

# configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_database_if_not_exists():
    """create db if it doesn't exist (PostgreSQL only)."""
    database_url = settings.DATABASE_URL

    if not database_url.startswith("postgresql"):
        logger.info("Database URL is not PostgreSQL, skipping database creation")
        return True

    try:
        parsed = urlparse(database_url)
        database_name = parsed.path[1:]  # Remove leading '/'

        # connect to the maintenance db to check/create ours
        postgres_url = f"{parsed.scheme}://{parsed.netloc}/postgres"
        postgres_engine = create_engine(postgres_url, isolation_level="AUTOCOMMIT")

        with postgres_engine.connect() as conn:
            result = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
                {"db_name": database_name}
            )

            if result.fetchone() is None:
                logger.info(f"Creating database: {database_name}")
                conn.execute(text(f'CREATE DATABASE "{database_name}"'))
                logger.info(f"Database {database_name} created successfully")
            else:
                logger.info(f"Database {database_name} already exists")

        postgres_engine.dispose()
        return True

    except Exception as e:
        logger.error(f"Error creating database: {e}")
        return False


def run_migrations():
    """run Alembic migrations to create/update schema."""
    try:
        logger.info("Running Alembic migrations...")
        os.chdir(project_root)

        result = subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            check=True
        )

        logger.info("Migrations completed successfully")
        logger.debug(f"Migration output: {result.stdout}")
        return True

    except subprocess.CalledProcessError as e:
        logger.error(f"Error running migrations: {e}")
        logger.error(f"Migration error output: {e.stderr}")
        return False


def seed_initial_data():
    """seed an admin user and a handful of products; prints a bearer token for the admin."""
    from orderdesk.models.models import User, Product
    from orderdesk.core.security import create_access_token

    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == "admin@orderdesk.local").first()
        if not admin:
            admin = User(name="Admin", email="admin@orderdesk.local", role="admin")
            db.add(admin)
            logger.info("Created admin user")

        if not db.query(Product).first():
            products = [
                Product(name="Slim Shirt", category="Shirts", price=120),
                Product(name="Fit Shirt", category="Shirts", price=100),
                Product(name="Slim Pants", category="Pants", price=250),
                Product(name="Fit Pants", category="Pants", price=90),
            ]
            db.add_all(products)
            logger.info(f"Created {len(products)} products")

        db.commit()
        db.refresh(admin)

        token = create_access_token(str(admin.id), role="admin")
        logger.info(f"Admin bearer token: {token}")
        return True

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        db.rollback()
        return False
    finally:
        db.close()


def check_database_connection():
    """check if we can connect to the db."""
    try:
        logger.info("Checking database connection...")

        with engine.connect() as conn:
            result = conn.execute(text("SELECT 1"))
            result.fetchone()

        logger.info("Database connection successful")
        return True

    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(description="Initialize ORDERDESK database")
    parser.add_argument(
        "--seed-data",
        action="store_true",
        help="Seed initial data (admin user, products)"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only check database connection, don't run migrations"
    )

    args = parser.parse_args()

    logger.info("Starting database initialization...")
    logger.info(f"Database host: {urlparse(settings.DATABASE_URL).hostname}")

    if args.check_only and not settings.DATABASE_URL.startswith("postgresql"):
        logger.info("Skipping database creation for non-PostgreSQL database in check-only mode")
    else:
        if not create_database_if_not_exists():
            logger.error("Failed to create database")
            return False

    if not check_database_connection():
        logger.error("Database connection failed")
        return False

    if args.check_only:
        logger.info("Database check completed successfully")
        return True

    if not run_migrations():
        logger.error("Migration failed")
        return False

    if args.seed_data:
        if not seed_initial_data():
            logger.error("Data seeding failed")
            return False

    logger.info("Database initialization completed successfully!")
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
