#!/usr/bin/env python3
"""
Database management commands: create tables, seed the service catalog,
create staff accounts and reset a development database.
"""

import argparse
import asyncio
import logging
import sys

from portal.config import settings
from portal.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from portal.models.user import UserRole
from portal.repositories.user import UserRepository
from portal.services.catalog import CatalogService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def init_db() -> None:
    await create_tables()
    logger.info("Database tables created")


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        inserted = await CatalogService(session).seed_default_services()
    if inserted:
        logger.info(f"Seeded {inserted} services")
    else:
        logger.info("Service catalog already populated, nothing to seed")


async def create_admin(email: str, password: str, full_name: str) -> None:
    async with AsyncSessionLocal() as session:
        repo = UserRepository(session)
        user = await repo.create_user({
            "email": email,
            "password": password,
            "full_name": full_name,
            "role": UserRole.UPCA_ADMIN,
        })
    logger.info(f"Created staff account {user.email}")


async def reset(confirm: bool) -> None:
    if settings.is_production:
        raise RuntimeError("Refusing to reset a production database")
    if not confirm:
        raise RuntimeError("Database reset requires --confirm")

    logger.warning("Dropping all tables")
    await drop_tables()
    await create_tables()
    await seed()
    logger.info("Database reset complete")


async def run(args: argparse.Namespace) -> None:
    try:
        if args.command == "init-db":
            await init_db()
        elif args.command == "seed":
            await seed()
        elif args.command == "create-admin":
            await create_admin(args.email, args.password, args.name)
        elif args.command == "reset":
            await reset(args.confirm)
    finally:
        await close_db_connection()


def main():
    parser = argparse.ArgumentParser(description="Realty Media Portal database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("seed", help="Seed the default service catalog")

    admin_parser = subparsers.add_parser("create-admin", help="Create a staff account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--name", default="UPCA Admin")

    reset_parser = subparsers.add_parser("reset", help="Drop and recreate all tables (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return 1

    try:
        asyncio.run(run(args))
    except (RuntimeError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
