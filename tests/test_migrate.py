# -*- coding: utf-8 -*-

from __future__ import annotations

import contextlib
import io
import shutil
import tempfile
import unittest
from pathlib import Path
from zoneinfo import ZoneInfo

from daily_tracker.app_db import LOCAL_TIME_MIGRATION, db_conn, get_migration, init_app_db, utc_now
from daily_tracker.local_time import fixed_offset
from daily_tracker.migrate import main, migrate_database


class TestMigrate(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="daily-tracker-migrate-"))
        self.addCleanup(shutil.rmtree, self.tmp, True)
        self.db_path = self.tmp / "legacy.db"
        init_app_db(self.db_path)
        now = utc_now()
        with db_conn(self.db_path) as conn:
            # Databases from before the marker table carry no row.
            conn.execute("DELETE FROM schema_migrations")
            conn.execute(
                "INSERT INTO users (id, email, password_hash, created_at, last_usage_reset) VALUES (?, ?, ?, ?, ?)",
                ("u1", "legacy@example.com", "x", now, now),
            )
            conn.execute(
                """
                INSERT INTO meal_entries (id, user_id, description, local_date_time, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                ("m1", "u1", "Breakfast", "2024-03-10T12:30:00.000Z", now, now),
            )
            conn.execute(
                """
                INSERT INTO weight_entries (id, user_id, local_date, weight, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                ("w1", "u1", "2024-03-10T00:00:00Z", 70.0, now, now),
            )

    def _column(self, sql: str) -> str:
        with db_conn(self.db_path) as conn:
            return conn.execute(sql).fetchone()[0]

    def test_rebases_meals_to_local_wall_clock(self) -> None:
        counts = migrate_database(self.db_path, fixed_offset(-5))
        self.assertEqual(counts["meal_entries"], 1)
        self.assertEqual(self._column("SELECT local_date_time FROM meal_entries"), "2024-03-10T07:30:00Z")
        self.assertEqual(self._column("SELECT local_date FROM weight_entries"), "2024-03-10T00:00:00Z")

    def test_iana_zone(self) -> None:
        migrate_database(self.db_path, ZoneInfo("Asia/Kolkata"))
        self.assertEqual(self._column("SELECT local_date_time FROM meal_entries"), "2024-03-10T18:00:00Z")

    def test_dry_run_writes_nothing(self) -> None:
        counts = migrate_database(self.db_path, fixed_offset(-5), dry_run=True)
        self.assertEqual(counts["meal_entries"], 1)
        self.assertEqual(self._column("SELECT local_date_time FROM meal_entries"), "2024-03-10T12:30:00.000Z")

    def test_second_run_changes_nothing(self) -> None:
        first = migrate_database(self.db_path, fixed_offset(-5))
        self.assertEqual(first["meal_entries"], 1)
        with self.assertLogs("daily_tracker.migrate", level="WARNING"):
            second = migrate_database(self.db_path, fixed_offset(-5))
        self.assertEqual(second, {"meal_entries": 0, "activity_entries": 0, "health_entries": 0})
        self.assertEqual(self._column("SELECT local_date_time FROM meal_entries"), "2024-03-10T07:30:00Z")

    def test_run_records_marker(self) -> None:
        migrate_database(self.db_path, fixed_offset(-5))
        with db_conn(self.db_path) as conn:
            marker = get_migration(conn, LOCAL_TIME_MIGRATION)
        self.assertIsNotNone(marker)
        self.assertIn("rebased", marker["detail"])

    def test_dry_run_leaves_no_marker(self) -> None:
        migrate_database(self.db_path, fixed_offset(-5), dry_run=True)
        with db_conn(self.db_path) as conn:
            self.assertIsNone(get_migration(conn, LOCAL_TIME_MIGRATION))
        counts = migrate_database(self.db_path, fixed_offset(-5))
        self.assertEqual(counts["meal_entries"], 1)

    def test_new_database_is_already_marked(self) -> None:
        fresh = self.tmp / "fresh.db"
        init_app_db(fresh)
        with db_conn(fresh) as conn:
            self.assertIsNotNone(get_migration(conn, LOCAL_TIME_MIGRATION))
        with self.assertLogs("daily_tracker.migrate", level="WARNING"):
            counts = migrate_database(fresh, fixed_offset(-5))
        self.assertEqual(sum(counts.values()), 0)

    def test_force_rebases_again(self) -> None:
        migrate_database(self.db_path, fixed_offset(-5))
        counts = migrate_database(self.db_path, fixed_offset(-5), force=True)
        self.assertEqual(counts["meal_entries"], 1)
        self.assertEqual(self._column("SELECT local_date_time FROM meal_entries"), "2024-03-10T02:30:00Z")

    def test_cli_refuses_migrated_database(self) -> None:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            self.assertEqual(main(["--utc-offset", "-5", "--db-path", str(self.db_path)]), 0)
            self.assertEqual(main(["--utc-offset", "-5", "--db-path", str(self.db_path)]), 1)
        self.assertIn("--force", out.getvalue())
        self.assertEqual(self._column("SELECT local_date_time FROM meal_entries"), "2024-03-10T07:30:00Z")

    def test_cli(self) -> None:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(["--utc-offset", "-5", "--db-path", str(self.db_path)])
        self.assertEqual(code, 0)
        self.assertIn("meal_entries: 1 rows rebased", out.getvalue())

    def test_cli_errors(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertEqual(main(["--tz", "Mars/Olympus_Mons", "--db-path", str(self.db_path)]), 1)
            self.assertEqual(main(["--utc-offset", "-5", "--db-path", str(self.tmp / "missing.db")]), 1)


if __name__ == "__main__":
    unittest.main()
