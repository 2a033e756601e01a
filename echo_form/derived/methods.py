"""Computation methods for derived fields.

Every method takes the raw stored values of its sources and returns the
derived value, or the empty value when it cannot be computed. None of
them raise on bad input.
"""

import math
from datetime import date, datetime

from echo_form.registry.models import EMPTY, Scalar

SCORE_MIN = 0
SCORE_MAX = 4


def parse_date(value: Scalar | date | None) -> date | None:
    """Parse an ISO date or datetime into a date.

    Args:
        value: A `date`, an ISO `YYYY-MM-DD` string, or an ISO datetime string.

    Returns:
        The parsed date, or None if the value is empty or unparseable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def age_in_years(date_of_birth: Scalar | date | None, today: date) -> Scalar:
    """Whole years elapsed from a birth date to today.

    The year difference is reduced by one when today's month/day falls
    before the birth month/day.

    Args:
        date_of_birth: The birth date value as stored in the form.
        today: The reference date.

    Returns:
        The age as an int, or the empty value for empty, unparseable or
        future birth dates.
    """
    born = parse_date(date_of_birth)
    if born is None or born > today:
        return EMPTY

    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def parse_score(value: Scalar | None) -> float | None:
    """Parse a sub-score, returning None unless it is a finite number in range."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number) or not (SCORE_MIN <= number <= SCORE_MAX):
        return None
    return number


def sum_scores(values: list[Scalar | None]) -> int | float:
    """Sum sub-scores, counting out-of-range or unparseable values as 0.

    Returns:
        The total as an int when it is a whole number, else a float.
    """
    total = 0.0
    for value in values:
        score = parse_score(value)
        if score is not None:
            total += score
    if total.is_integer():
        return int(total)
    return total
