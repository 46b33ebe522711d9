# -*- coding: utf-8 -*-
"""
Rewrite legacy timestamps into local-time envelopes.

Older databases stored entry times as real UTC instants, so a 07:30 breakfast
logged in Bogota was kept as 12:30Z. This tool recovers the wall clock each
user saw by shifting every row into a fixed offset or an IANA zone and storing
the result the way `daily_tracker.local_time` expects. A successful run
marks the database in `schema_migrations`; later runs refuse unless forced.

Usage:
    python -m daily_tracker.migrate --utc-offset -5
    python -m daily_tracker.migrate --tz America/Bogota --dry-run
    python -m daily_tracker.migrate --utc-offset -5 --force
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Dict, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .app_db import LOCAL_TIME_MIGRATION, db_conn, get_migration, record_migration
from .config import settings
from .local_time import fixed_offset, rebase_instant, to_column

logger = logging.getLogger(__name__)

# Tables whose wall-clock column held true instants. Weight rows already
# carried the calendar day and are left alone.
MIGRATED_COLUMNS = {
    "meal_entries": "local_date_time",
    "activity_entries": "local_date_time",
    "health_entries": "local_date_time",
}


def _parse_legacy(text: str) -> datetime:
    instant = datetime.fromisoformat(text.strip().replace("Z", "+00:00"))
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def migration_applied_at(db_path: Path) -> Optional[str]:
    with db_conn(db_path) as conn:
        marker = get_migration(conn, LOCAL_TIME_MIGRATION)
    return marker["applied_at"] if marker else None


def migrate_database(db_path: Path, tz: tzinfo, *, dry_run: bool = False, force: bool = False) -> Dict[str, int]:
    """Rebase every legacy row; returns the number of rows changed per table.

    A database already holding envelopes (created by this version, or
    migrated before) is left untouched unless `force` is set: rebasing twice
    shifts every entry by the offset again. The marker is written in the same
    transaction as the row updates.
    """
    counts: Dict[str, int] = {table: 0 for table in MIGRATED_COLUMNS}
    with db_conn(db_path) as conn:
        marker = get_migration(conn, LOCAL_TIME_MIGRATION)
        if marker and not force:
            logger.warning("Database already holds local-time envelopes (since %s); nothing rebased", marker["applied_at"])
            return counts
        for table, column in MIGRATED_COLUMNS.items():
            rows = conn.execute(f"SELECT id, {column} FROM {table}").fetchall()
            changed = 0
            for row in rows:
                legacy = row[column]
                rebased = to_column(rebase_instant(_parse_legacy(legacy), tz))
                if rebased == legacy:
                    continue
                logger.debug("%s %s: %s -> %s", table, row["id"], legacy, rebased)
                if not dry_run:
                    conn.execute(f"UPDATE {table} SET {column} = ? WHERE id = ?", (rebased, row["id"]))
                changed += 1
            counts[table] = changed
            logger.info("%s: %d of %d rows rebased%s", table, changed, len(rows), " (dry run)" if dry_run else "")
        if not dry_run:
            record_migration(conn, LOCAL_TIME_MIGRATION, f"rebased from true UTC using {tz}")
    return counts


def _resolve_zone(args: argparse.Namespace) -> tzinfo:
    if args.tz:
        return ZoneInfo(args.tz)
    return fixed_offset(args.utc_offset)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Convert legacy UTC timestamps into local-time envelopes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    zone = parser.add_mutually_exclusive_group(required=True)
    zone.add_argument("--utc-offset", type=float, help="Fixed offset in hours, e.g. -5")
    zone.add_argument("--tz", help="IANA zone name, e.g. America/Bogota")
    parser.add_argument(
        "--db-path",
        help=f"SQLite database to migrate (default: {settings.app_db_path})",
    )
    parser.add_argument("--dry-run", action="store_true", help="Report counts without writing")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Rebase again even though the database is marked as migrated",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(message)s")

    try:
        tz = _resolve_zone(args)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"Error: unknown time zone: {args.tz}")
        return 1

    db_path = Path(args.db_path) if args.db_path else settings.app_db_path
    if not db_path.exists():
        print(f"Error: database not found: {db_path}")
        return 1

    applied_at = migration_applied_at(db_path)
    if applied_at and not args.force:
        print(f"Error: database already holds local-time envelopes (since {applied_at}); use --force to rebase again")
        return 1

    counts = migrate_database(db_path, tz, dry_run=args.dry_run, force=args.force)
    for table, changed in counts.items():
        print(f"{table}: {changed} rows {'would be ' if args.dry_run else ''}rebased")
    return 0


if __name__ == "__main__":
    sys.exit(main())
