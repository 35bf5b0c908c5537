"""Calendar quarter utilities and filing due dates."""

import calendar
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from ..schemas import FilingRecord


def quarter_of(d: date) -> int:
    """Quarter number (1-4) of a date."""
    return (d.month - 1) // 3 + 1


def _check_quarter(quarter: int) -> None:
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"Quarter must be 1-4, got: {quarter}")


def quarter_start(year: int, quarter: int) -> date:
    _check_quarter(quarter)
    return date(year, (quarter - 1) * 3 + 1, 1)


def quarter_end(year: int, quarter: int) -> date:
    _check_quarter(quarter)
    month = quarter * 3
    return date(year, month, calendar.monthrange(year, month)[1])


def quarter_dates(year: int, quarter: int) -> Tuple[date, date]:
    return quarter_start(year, quarter), quarter_end(year, quarter)


def month_in_quarter(d: date) -> int:
    """Position of the date's month within its quarter: 0, 1 or 2."""
    return (d.month - 1) % 3


def _last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def _next_month(year: int, month: int) -> Tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def records_in_quarter(records: Iterable[FilingRecord], year: int, quarter: int) -> List[FilingRecord]:
    """Records whose pay date falls in the quarter."""
    start, end = quarter_dates(year, quarter)
    return [r for r in records if start <= r.pay_date <= end]


def check_records_in_quarter(records: Iterable[FilingRecord], year: int, quarter: int) -> List[FilingRecord]:
    """Return the records as a list; raise ValueError if any is paid outside the quarter."""
    start, end = quarter_dates(year, quarter)
    records = list(records)
    for record in records:
        if not start <= record.pay_date <= end:
            raise ValueError(
                f"Record for {record.employee_id} paid {record.pay_date} is outside {year} Q{quarter}"
            )
    return records


def check_records_in_year(records: Iterable[FilingRecord], year: int) -> List[FilingRecord]:
    records = list(records)
    for record in records:
        if record.pay_date.year != year:
            raise ValueError(f"Record for {record.employee_id} paid {record.pay_date} is outside {year}")
    return records


# =============================================================================
# Due dates
# =============================================================================


def fifteenth_due_date(period_end: date) -> date:
    """15th of the month after the period (941 monthly deposits, CA PIT/SDI)."""
    year, month = _next_month(period_end.year, period_end.month)
    return date(year, month, 15)


def quarterly_due_date(period_end: date) -> date:
    """Last day of the month after the quarter (Form 941, FUTA deposits).

    Example:
        Q1 ends 3/31 -> 4/30, Q4 ends 12/31 -> 1/31
    """
    year, month = _next_month(period_end.year, period_end.month)
    return _last_day_of_month(year, month)


def form940_due_date(year: int) -> date:
    """January 31 of the following year, moved to Monday if on a weekend."""
    due = date(year + 1, 1, 31)
    if due.weekday() == 5:
        due += timedelta(days=2)
    elif due.weekday() == 6:
        due += timedelta(days=1)
    return due


def de9_deadlines(year: int, quarter: int) -> Dict[str, date]:
    """DE 9 dates: due the first of the month after the quarter, delinquent at its end."""
    start, end = quarter_dates(year, quarter)
    due_year, due_month = _next_month(end.year, end.month)
    return {
        "quarter_started": start,
        "quarter_ended": end,
        "due": date(due_year, due_month, 1),
        "delinquent": _last_day_of_month(due_year, due_month),
    }
