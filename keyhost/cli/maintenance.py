"""
Data maintenance commands: mojibake repair, orphan checks and schema checks.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keyhost.config import settings
from keyhost.database import build_engine
from keyhost.maintenance import (
    check_schema,
    check_settings,
    find_orphans,
    fix_orphan_properties,
    fix_property_encoding,
)

logger = logging.getLogger(__name__)


async def run_fix_encoding(session: AsyncSession, dry_run: bool) -> bool:
    changes = await fix_property_encoding(session, dry_run=dry_run)
    verb = "Would repair" if dry_run else "Repaired"
    for change in changes:
        print(f"{verb} {change['column']} of {change['property_id']}: {change['before']!r} -> {change['after']!r}")
    print(f"{verb} {len(changes)} value(s)")
    return True


async def run_check_orphans(session: AsyncSession) -> bool:
    report = await find_orphans(session)
    total = 0
    for entry in report:
        total += entry["count"]
        marker = "OK  " if entry["count"] == 0 else "FAIL"
        print(f"{marker} {entry['table']}.{entry['column']} -> {entry['references']}: {entry['count']} orphan(s)")
    print(f"{total} orphaned row(s) in total")
    return total == 0


async def run_fix_orphans(session: AsyncSession, owner_email: Optional[str]) -> bool:
    fixed = await fix_orphan_properties(session, owner_email)
    print(f"Reassigned {fixed} orphaned propert{'y' if fixed == 1 else 'ies'}")
    return True


async def run_check_settings(session: AsyncSession) -> bool:
    report = await check_settings(session)
    print(f"{report['total']} setting(s), {report['public']} public")
    if report["missing_defaults"]:
        print("Missing defaults: " + ", ".join(report["missing_defaults"]))
        print("Run `keyhost-migrate seed-settings` to add them")
    return report["ok"]


async def run(args: argparse.Namespace) -> bool:
    """Execute one maintenance command against a dedicated engine."""
    engine = build_engine(args.database_url or settings.database_url)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        if args.command == "check-schema":
            async with engine.connect() as connection:
                report = await check_schema(connection)
            for table in report["missing_tables"]:
                print(f"Missing table: {table}")
            for table, columns in report["missing_columns"].items():
                print(f"Missing columns in {table}: {', '.join(columns)}")
            print("Schema is up to date" if report["ok"] else "Schema is behind the models; run `keyhost-migrate upgrade`")
            return report["ok"]

        async with session_factory() as session:
            if args.command == "fix-encoding":
                return await run_fix_encoding(session, args.dry_run)
            if args.command == "check-orphans":
                return await run_check_orphans(session)
            if args.command == "fix-orphans":
                return await run_fix_orphans(session, args.owner_email)
            if args.command == "check-settings":
                return await run_check_settings(session)

        raise ValueError(f"Unknown command: {args.command}")
    finally:
        await engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keyhost-maintenance", description="Data maintenance")
    parser.add_argument("--database-url", help="Override the configured database URL")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    encoding_parser = subparsers.add_parser("fix-encoding", help="Repair mojibake in property text")
    encoding_parser.add_argument("--dry-run", action="store_true", help="Report without writing")

    subparsers.add_parser("check-orphans", help="Count rows with dangling foreign keys")

    orphans_parser = subparsers.add_parser("fix-orphans", help="Reassign properties with a missing owner")
    orphans_parser.add_argument("--owner-email", help="Account that receives the properties")

    subparsers.add_parser("check-settings", help="Report missing default settings")
    subparsers.add_parser("check-schema", help="Compare the database with the models")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        ok = asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
