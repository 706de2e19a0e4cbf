"""Caller input checks run before any request is issued."""
from __future__ import annotations

from datetime import date, datetime
from numbers import Integral
from typing import Optional, Tuple, Union

from nasaquery.errors import ValidationError

DateLike = Union[str, date]

VALID_ROVERS = ("curiosity", "opportunity", "spirit", "perseverance")


def parse_iso_date(value: DateLike, field_name: str = "date") -> date:
    """Coerce a ``YYYY-MM-DD`` string or date object into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD string, got {type(value).__name__}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format, got {value!r}") from exc


def validate_date_range(
    start_date: DateLike,
    end_date: DateLike,
    max_days: Optional[int] = None,
) -> Tuple[date, date]:
    start = parse_iso_date(start_date, "start_date")
    end = parse_iso_date(end_date, "end_date")
    if end < start:
        raise ValidationError(f"end_date {end.isoformat()} is before start_date {start.isoformat()}")
    if max_days is not None and (end - start).days > max_days:
        raise ValidationError(
            f"Date range {start.isoformat()}..{end.isoformat()} exceeds the {max_days}-day maximum"
        )
    return start, end


def validate_rover(rover: str) -> str:
    # Exact, case-sensitive match.
    if rover not in VALID_ROVERS:
        choices = ", ".join(f"'{name}'" for name in VALID_ROVERS)
        raise ValidationError(f"Invalid rover name {rover!r}. Please select from: {choices}.")
    return rover


def validate_result_count(n_results: int) -> int:
    if isinstance(n_results, bool) or not isinstance(n_results, Integral):
        raise ValidationError(f"n_results must be an integer, got {n_results!r}")
    if n_results < 0:
        raise ValidationError(f"n_results must be non-negative, got {n_results}")
    return int(n_results)
