"""
Audit-closure duration analytics.

Durations are measured in business days (Mon-Fri, both ends inclusive).
Only CLOSED audits with a valid opening and closing date take part; anything
else is left out entirely rather than counted as zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from app.audittrack.constants import CompanyStatus
from app.audittrack.modules.companies.domain import Company
from app.audittrack.utils import parse_datetime, round_half_up

# Short Turkish month names for chart labels ("Oca 24").
MONTH_LABELS = ("Oca", "Şub", "Mar", "Nis", "May", "Haz", "Tem", "Ağu", "Eyl", "Eki", "Kas", "Ara")

FAST_MAX_DAYS = 10
NORMAL_MAX_DAYS = 20


@dataclass(frozen=True)
class ClosedAudit:
    company: Company
    opened: datetime
    closed: datetime
    days: int

    @property
    def band(self) -> str:
        if self.days <= FAST_MAX_DAYS:
            return "fast"
        if self.days <= NORMAL_MAX_DAYS:
            return "normal"
        return "slow"


@dataclass(frozen=True)
class MonthlyAverage:
    year: int
    month: int
    average_days: float
    count: int

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{MONTH_LABELS[self.month - 1]} {self.year % 100:02d}"


@dataclass(frozen=True)
class DurationReport:
    total_closed: int
    average_days: float
    monthly: list[MonthlyAverage]
    best: ClosedAudit | None
    worst: ClosedAudit | None
    history: list[ClosedAudit]  # newest closing date first


def business_days_between(start: object, end: object) -> int:
    """
    Weekdays from `start` to `end`, both inclusive, ignoring time of day.

    Returns 0 when either bound cannot be parsed. Otherwise the result is at
    least 1, also for weekend-only or reversed ranges.
    """
    start_dt = parse_datetime(start)
    end_dt = parse_datetime(end)
    if start_dt is None or end_dt is None:
        return 0

    first = start_dt.date()
    last = end_dt.date()
    if last < first:
        return 1

    span = (last - first).days + 1
    full_weeks, leftover = divmod(span, 7)
    count = full_weeks * 5
    # weekday(): Monday=0 ... Saturday=5, Sunday=6
    count += sum(1 for i in range(leftover) if (first.weekday() + i) % 7 < 5)
    return max(1, count)


def closed_audits(companies: Iterable[Company]) -> list[ClosedAudit]:
    out = []
    for c in companies:
        if c.status != CompanyStatus.CLOSED:
            continue
        opened = parse_datetime(c.audit_opening_date)
        closed = parse_datetime(c.audit_closing_date)
        if opened is None or closed is None:
            continue
        out.append(ClosedAudit(company=c, opened=opened, closed=closed, days=business_days_between(opened, closed)))
    return out


def _mean_1dp(values: list[int]) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), 1)


def monthly_averages(audits: Iterable[ClosedAudit]) -> list[MonthlyAverage]:
    buckets: dict[tuple[int, int], list[int]] = {}
    for a in audits:
        buckets.setdefault((a.closed.year, a.closed.month), []).append(a.days)
    return [
        MonthlyAverage(year=year, month=month, average_days=_mean_1dp(days), count=len(days))
        for (year, month), days in sorted(buckets.items())
    ]


def audit_duration_report(companies: Iterable[Company]) -> DurationReport:
    audits = closed_audits(companies)
    # sorted() is stable, so ties keep their original order.
    by_days = sorted(audits, key=lambda a: a.days)
    return DurationReport(
        total_closed=len(audits),
        average_days=_mean_1dp([a.days for a in audits]),
        monthly=monthly_averages(audits),
        best=by_days[0] if by_days else None,
        worst=by_days[-1] if by_days else None,
        history=sorted(audits, key=lambda a: a.closed, reverse=True),
    )
