from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Tuple

from statement_report.schemas import RunContext

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class InvalidExecutionDateError(ValueError):
    pass


def split_execution_date(value: str) -> Tuple[str, str, str]:
    """Split a YYYY-MM-DD string into its year, month and day substrings."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise InvalidExecutionDateError(
            f"Execution date must look like YYYY-MM-DD, got {value!r}"
        )
    year, month, day = value.split("-")
    return year, month, day


def resolve_execution_date(
    value: Optional[str] = None, today: Optional[date] = None
) -> RunContext:
    """Build the run context from an explicit date or from today's date."""
    if value is None:
        value = (today or date.today()).strftime(DATE_FORMAT)
    if isinstance(value, str):
        value = value.strip()
    year, month, day = split_execution_date(value)
    try:
        parsed = datetime.strptime(f"{year}-{month}-{day}", DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidExecutionDateError(
            f"Execution date {value!r} is not a calendar date: {exc}"
        ) from exc
    return RunContext(execution_date=parsed, year=year, month=month, day=day)
