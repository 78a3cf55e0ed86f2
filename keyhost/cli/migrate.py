"""
Database migration management.
Runs the Alembic revision chain, seeds default settings and bootstraps an admin.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional

from alembic import command
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from keyhost.config import settings
from keyhost.database import build_engine, drop_tables
from keyhost.migrations import get_alembic_config
from keyhost.models.user import UserType
from keyhost.repositories.user import UserRepository
from keyhost.services.settings import SettingsService

logger = logging.getLogger(__name__)

BENIGN_ERROR_MARKERS = ("already exists", "duplicate")


def is_benign_error(error: Exception) -> bool:
    """Whether a migration error only says the object is already there."""
    message = str(error).lower()
    return any(marker in message for marker in BENIGN_ERROR_MARKERS)


class MigrationManager:
    """Manages the schema and the bootstrap data of one database."""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.database_url
        self.config = get_alembic_config(self.database_url)

    def upgrade(self, revision: str = "head") -> None:
        """
        Apply revisions up to ``revision``.

        Errors reporting an object that already exists are logged as
        warnings; anything else propagates.
        """
        logger.info(f"Upgrading database to {revision}")
        try:
            command.upgrade(self.config, revision)
            logger.info("Migrations completed successfully")
        except Exception as e:
            if not is_benign_error(e):
                raise
            logger.warning(f"Migration skipped an existing object: {e}")

    def downgrade(self, revision: str = "-1") -> None:
        logger.info(f"Downgrading database to {revision}")
        command.downgrade(self.config, revision)
        logger.info("Downgrade completed successfully")

    def current(self) -> None:
        command.current(self.config, verbose=True)

    def history(self) -> None:
        command.history(self.config, verbose=True)

    def _session_factory(self):
        engine = build_engine(self.database_url)
        return engine, async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def seed_settings(self, force: bool = False) -> int:
        """
        Insert default settings.

        Args:
            force: Overwrite existing values with the defaults

        Returns:
            Number of settings written
        """
        engine, session_factory = self._session_factory()
        try:
            async with session_factory() as session:
                return await SettingsService(session).seed_defaults(overwrite=force)
        finally:
            await engine.dispose()

    async def create_admin(self, email: str, password: str, first_name: str, last_name: str) -> bool:
        """
        Create an admin account unless the email is taken.

        Returns:
            True if the account was created
        """
        engine, session_factory = self._session_factory()
        try:
            async with session_factory() as session:
                user_repo = UserRepository(session)
                if await user_repo.get_by_email(email):
                    logger.info(f"User {email} already exists, skipping")
                    return False

                await user_repo.create_user({
                    "email": email,
                    "password": password,
                    "first_name": first_name,
                    "last_name": last_name,
                    "user_type": UserType.ADMIN,
                })
                logger.info(f"Admin user created: {email}")
                return True
        finally:
            await engine.dispose()

    async def _drop_all(self) -> None:
        engine = build_engine(self.database_url)
        try:
            await drop_tables(engine)
        finally:
            await engine.dispose()

    def reset(self) -> None:
        """
        Drop every table and rebuild the schema from the first revision.

        Raises:
            RuntimeError: In production
        """
        if settings.is_production:
            raise RuntimeError("Database reset is not allowed in production")

        logger.warning("Resetting database - all data will be lost!")
        asyncio.run(self._drop_all())
        command.stamp(self.config, "base", purge=True)
        self.upgrade("head")
        logger.info("Database reset completed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keyhost-migrate", description="Database migration management")
    parser.add_argument("--database-url", help="Override the configured database URL")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upgrade_parser = subparsers.add_parser("upgrade", help="Apply pending migrations")
    upgrade_parser.add_argument("revision", nargs="?", default="head", help="Target revision")

    downgrade_parser = subparsers.add_parser("downgrade", help="Revert migrations")
    downgrade_parser.add_argument("revision", nargs="?", default="-1", help="Target revision")

    subparsers.add_parser("current", help="Show current revision")
    subparsers.add_parser("history", help="Show migration history")

    seed_parser = subparsers.add_parser("seed-settings", help="Insert default settings")
    seed_parser.add_argument("--force", action="store_true", help="Overwrite existing values")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", help="Prompted for when omitted")
    admin_parser.add_argument("--first-name", default="Platform")
    admin_parser.add_argument("--last-name", default="Admin")

    reset_parser = subparsers.add_parser("reset", help="Drop and rebuild the schema (non-production only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI interface for migration management. Returns the exit status."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    manager = MigrationManager(args.database_url)

    try:
        if args.command == "upgrade":
            manager.upgrade(args.revision)

        elif args.command == "downgrade":
            manager.downgrade(args.revision)

        elif args.command == "current":
            manager.current()

        elif args.command == "history":
            manager.history()

        elif args.command == "seed-settings":
            written = asyncio.run(manager.seed_settings(force=args.force))
            print(f"{written} settings written")

        elif args.command == "create-admin":
            password = args.password or getpass.getpass("Admin password: ")
            asyncio.run(manager.create_admin(args.email, password, args.first_name, args.last_name))

        elif args.command == "reset":
            if not args.confirm:
                print("Database reset requires --confirm flag")
                return 1
            manager.reset()

    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
