"""Loader for the packaged lifestyle -> annual interest rate reference table."""

from __future__ import annotations

import csv
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Union

from retirement_calculator.domain.models import RateEntry

logger = logging.getLogger(__name__)

DEFAULT_RATE_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "lifestyle_interest_rates.csv"
EXPECTED_HEADER = ["lifestyleType", "interestRate"]
MIN_RATE = Decimal("0")
MAX_RATE = Decimal("100")


class RateTableError(Exception):
    """The rate table is missing or its header is not ``lifestyleType,interestRate``."""


def load_rate_table(path: Union[str, Path] = DEFAULT_RATE_TABLE_PATH) -> List[RateEntry]:
    path = Path(path)
    try:
        handle = open(path, "r", encoding="utf-8", newline="")
    except OSError as exc:
        raise RateTableError(f"Cannot open rate table {path}: {exc}") from exc

    entries: Dict[str, RateEntry] = {}
    with handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if header is None or [column.strip() for column in header] != EXPECTED_HEADER:
            raise RateTableError("Invalid CSV format: missing or incorrect header")

        for line_number, row in enumerate(reader, start=2):
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) != 2:
                logger.warning("Skipping invalid line %s in rate table: %s", line_number, ",".join(row))
                continue

            lifestyle_type = row[0].strip()
            try:
                interest_rate = Decimal(row[1].strip())
            except InvalidOperation:
                logger.warning("Skipping line %s with invalid interest rate: %s", line_number, ",".join(row))
                continue

            if not lifestyle_type or not interest_rate.is_finite() or not MIN_RATE <= interest_rate <= MAX_RATE:
                logger.warning("Skipping line %s with out-of-range entry: %s", line_number, ",".join(row))
                continue

            entry = RateEntry(lifestyle_type=lifestyle_type, interest_rate=interest_rate)
            entries[entry.key] = entry

    logger.debug("Loaded %s interest rate records from %s", len(entries), path)
    return list(entries.values())
