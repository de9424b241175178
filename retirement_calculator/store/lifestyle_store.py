from __future__ import annotations

import logging
import sqlite3
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Union

from retirement_calculator.domain.models import LifestyleProfile

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "lifestyles.db"

DEFAULT_LIFESTYLES = (
    LifestyleProfile(
        lifestyle_type="simple",
        monthly_deposit=Decimal("2000.00"),
        annual_expenses=Decimal("30000.00"),
        description="Basic lifestyle with moderate expenses",
    ),
    LifestyleProfile(
        lifestyle_type="fancy",
        monthly_deposit=Decimal("5000.00"),
        annual_expenses=Decimal("90000.00"),
        description="Luxury lifestyle with premium expenses",
    ),
)


class LifestyleStore:
    """SQLite-backed table of lifestyle deposits. Amounts are stored as text to keep them exact."""

    def __init__(self, db_path: Union[str, Path] = DEFAULT_DB_PATH, timeout_seconds: float = 5.0) -> None:
        self.db_path = Path(db_path)
        self.timeout_seconds = timeout_seconds

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
        conn.row_factory = sqlite3.Row
        return conn

    def init_schema(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(
                """
                create table if not exists lifestyle_deposits (
                    id integer primary key autoincrement,
                    lifestyle_type text not null,
                    monthly_deposit text not null,
                    annual_expenses text not null default '0',
                    description text
                )
                """
            )
            conn.execute(
                """
                create unique index if not exists ux_lifestyle_deposits_type
                on lifestyle_deposits (lower(lifestyle_type))
                """
            )
            conn.commit()
        finally:
            conn.close()

    def seed(self, profiles: Iterable[LifestyleProfile] = DEFAULT_LIFESTYLES) -> int:
        """Insert the given profiles when the table is empty. Returns how many were written."""
        if self.find_all():
            return 0
        written = 0
        for profile in profiles:
            self.save(profile)
            written += 1
        logger.info("Seeded lifestyle table with %s records", written)
        return written

    def save(self, profile: LifestyleProfile) -> None:
        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                update lifestyle_deposits
                set monthly_deposit = ?, annual_expenses = ?, description = ?
                where lower(lifestyle_type) = lower(?)
                """,
                (
                    str(profile.monthly_deposit),
                    str(profile.annual_expenses),
                    profile.description,
                    profile.lifestyle_type,
                ),
            )
            if cursor.rowcount == 0:
                conn.execute(
                    """
                    insert into lifestyle_deposits (lifestyle_type, monthly_deposit, annual_expenses, description)
                    values (?, ?, ?, ?)
                    """,
                    (
                        profile.lifestyle_type,
                        str(profile.monthly_deposit),
                        str(profile.annual_expenses),
                        profile.description,
                    ),
                )
            conn.commit()
        finally:
            conn.close()

    def find_all(self) -> List[LifestyleProfile]:
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                select lifestyle_type, monthly_deposit, annual_expenses, description
                from lifestyle_deposits
                order by id
                """
            ).fetchall()
            return [_row_to_profile(row) for row in rows]
        finally:
            conn.close()

    def find_by_name_ignore_case(self, name: str) -> Optional[LifestyleProfile]:
        conn = self._connect()
        try:
            row = conn.execute(
                """
                select lifestyle_type, monthly_deposit, annual_expenses, description
                from lifestyle_deposits
                where lower(lifestyle_type) = lower(?)
                """,
                (name.strip(),),
            ).fetchone()
            if row is None:
                return None
            return _row_to_profile(row)
        finally:
            conn.close()


def _row_to_profile(row: sqlite3.Row) -> LifestyleProfile:
    return LifestyleProfile(
        lifestyle_type=row["lifestyle_type"],
        monthly_deposit=Decimal(row["monthly_deposit"]),
        annual_expenses=Decimal(row["annual_expenses"] or "0"),
        description=row["description"],
    )
