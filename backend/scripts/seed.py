"""
Seed the database with an admin and a client account

Existing accounts (matched by email) are left untouched, so the script
can run repeatedly.

Usage:
    cd backend && python3 scripts/seed.py [--create-tables]

Options:
    --create-tables : Create missing tables before seeding
"""
import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from storefront.core.auth import hash_password  # noqa: E402
from storefront.core.config import get_settings  # noqa: E402
from storefront.core.database import Database, atomic  # noqa: E402
from storefront.core.logging_config import setup_logging  # noqa: E402
from storefront.models.user import Client, User, UserType  # noqa: E402
from storefront.repositories.user_repository import UserRepository  # noqa: E402

logger = logging.getLogger("storefront.seed")

SEED_USERS = [
    {
        "email": "admin@example.com",
        "name": "Admin User",
        "password": "admin123",
        "type": UserType.ADMIN,
    },
    {
        "email": "client@example.com",
        "name": "Test Client",
        "password": "client123",
        "type": UserType.CLIENT,
        "client": {"contact": "1234567890", "address": "123 Test St"},
    },
]


def seed(database: Database) -> int:
    """Insert missing seed users, returning how many were created"""
    created = 0
    with database.session() as db:
        users = UserRepository(db)
        with atomic(db):
            for account in SEED_USERS:
                if users.find_by_email(account["email"]) is not None:
                    logger.info(f"{account['email']} already exists, skipping")
                    continue

                user = User(
                    email=account["email"],
                    name=account["name"],
                    password_hash=hash_password(account["password"]),
                    type=account["type"].value,
                    email_verified=True,
                )
                if "client" in account:
                    user.client = Client(full_name=account["name"], status=True, **account["client"])
                users.add(user)
                created += 1
                logger.info(f"Created {account['type'].value} user {account['email']}")
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed admin and client accounts")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL)

    try:
        if args.create_tables:
            database.create_all()
        created = seed(database)
        logger.info(f"Seeding finished: {created} user(s) created")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
