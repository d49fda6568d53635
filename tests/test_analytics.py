"""
Unit tests for audit-duration analytics.
"""
from dataclasses import replace
from datetime import date, datetime, timedelta

from app.audittrack.constants import CompanyStatus
from app.audittrack.modules.analytics.service import (
    audit_duration_report,
    business_days_between,
    closed_audits,
    monthly_averages,
)
from app.audittrack.modules.companies.domain import new_company


def _closed(name, opened, closed, status=CompanyStatus.CLOSED):
    c = new_company(name=name, email=f"{name.lower()}@example.com", now=opened)
    return replace(c, status=status, audit_opening_date=opened, audit_closing_date=closed)


class TestBusinessDays:
    """Tests for business_days_between()"""

    def test_full_week(self):
        # 2024-01-01 is a Monday
        assert business_days_between(datetime(2024, 1, 1), datetime(2024, 1, 5)) == 5

    def test_weekend_only_is_one(self):
        assert business_days_between(datetime(2024, 1, 6), datetime(2024, 1, 7)) == 1

    def test_same_day_is_one(self):
        assert business_days_between(datetime(2024, 1, 3), datetime(2024, 1, 3)) == 1

    def test_spans_weekend(self):
        # Fri -> Mon
        assert business_days_between(datetime(2024, 1, 5), datetime(2024, 1, 8)) == 2

    def test_time_of_day_ignored(self):
        assert business_days_between(datetime(2024, 1, 1, 23, 59), datetime(2024, 1, 2, 0, 1)) == 2

    def test_reversed_range_is_one(self):
        assert business_days_between(datetime(2024, 1, 10), datetime(2024, 1, 1)) == 1

    def test_accepts_iso_strings(self):
        assert business_days_between("2024-01-01", "2024-01-12") == 10

    def test_leap_year(self):
        # 366 days, starting Monday: 52 weeks + Mon, Tue
        assert business_days_between(datetime(2024, 1, 1), datetime(2024, 12, 31)) == 262

    def test_full_calendar_range(self):
        # 0001-01-01 is a Monday, 9999-12-31 a Friday
        assert business_days_between(datetime(1, 1, 1), datetime(9999, 12, 31)) == 2608615

    def test_matches_day_by_day_count(self):
        base = date(2024, 1, 1)
        for start_offset in range(7):
            start = base + timedelta(days=start_offset)
            for length in range(30):
                end = start + timedelta(days=length)
                naive = sum(1 for i in range(length + 1) if (start + timedelta(days=i)).weekday() < 5)
                assert business_days_between(start, end) == max(1, naive), (start, end)

    def test_unparseable_is_zero(self):
        assert business_days_between("kapanmadı", datetime(2024, 1, 5)) == 0
        assert business_days_between(datetime(2024, 1, 1), None) == 0


class TestParticipation:
    """Tests for closed_audits()"""

    def test_only_closed_with_both_dates(self):
        ok = _closed("Ok", datetime(2024, 1, 1), datetime(2024, 1, 5))
        not_closed = _closed("Open", datetime(2024, 1, 1), datetime(2024, 1, 5), status=CompanyStatus.READY_TO_CLOSE)
        no_closing = _closed("NoDate", datetime(2024, 1, 1), None)
        audits = closed_audits([ok, not_closed, no_closing])
        assert [a.company.name for a in audits] == ["Ok"]
        assert audits[0].days == 5

    def test_bands(self):
        fast = closed_audits([_closed("F", datetime(2024, 1, 1), datetime(2024, 1, 12))])[0]
        normal = closed_audits([_closed("N", datetime(2024, 1, 1), datetime(2024, 1, 26))])[0]
        slow = closed_audits([_closed("S", datetime(2024, 1, 1), datetime(2024, 2, 9))])[0]
        assert (fast.days, fast.band) == (10, "fast")
        assert (normal.days, normal.band) == (20, "normal")
        assert (slow.days, slow.band) == (30, "slow")


class TestMonthly:
    """Tests for monthly_averages()"""

    def test_average_within_month(self):
        audits = closed_audits(
            [
                _closed("A", datetime(2024, 1, 1), datetime(2024, 1, 12)),  # 10
                _closed("B", datetime(2024, 1, 1), datetime(2024, 1, 26)),  # 20
            ]
        )
        monthly = monthly_averages(audits)
        assert len(monthly) == 1
        assert monthly[0].key == "2024-01"
        assert monthly[0].label == "Oca 24"
        assert monthly[0].average_days == 15.0
        assert monthly[0].count == 2

    def test_sorted_and_absent_months_omitted(self):
        audits = closed_audits(
            [
                _closed("Mar", datetime(2024, 3, 4), datetime(2024, 3, 8)),
                _closed("Dec", datetime(2023, 12, 4), datetime(2023, 12, 5)),
                _closed("Jan", datetime(2024, 1, 1), datetime(2024, 1, 1)),
            ]
        )
        assert [m.key for m in monthly_averages(audits)] == ["2023-12", "2024-01", "2024-03"]

    def test_rounds_to_one_decimal(self):
        audits = closed_audits(
            [
                _closed("A", datetime(2024, 1, 1), datetime(2024, 1, 1)),  # 1
                _closed("B", datetime(2024, 1, 1), datetime(2024, 1, 1)),  # 1
                _closed("C", datetime(2024, 1, 1), datetime(2024, 1, 2)),  # 2
            ]
        )
        # 4 / 3 = 1.333...
        assert monthly_averages(audits)[0].average_days == 1.3


class TestReport:
    """Tests for audit_duration_report()"""

    def test_empty(self):
        report = audit_duration_report([])
        assert report.total_closed == 0
        assert report.average_days == 0.0
        assert report.monthly == []
        assert report.best is None
        assert report.worst is None
        assert report.history == []

    def test_best_worst_and_history(self):
        a = _closed("A", datetime(2024, 1, 1), datetime(2024, 1, 12))  # 10
        b = _closed("B", datetime(2024, 2, 1), datetime(2024, 2, 1))  # 1
        c = _closed("C", datetime(2024, 1, 1), datetime(2024, 1, 26))  # 20
        open_one = _closed("Open", datetime(2024, 1, 1), None, status=CompanyStatus.NO_DOCS)

        report = audit_duration_report([a, b, c, open_one])
        assert report.total_closed == 3
        assert report.average_days == round((10 + 1 + 20) / 3, 1)
        assert report.best.company.name == "B"
        assert report.worst.company.name == "C"
        assert [h.company.name for h in report.history] == ["B", "C", "A"]

    def test_ties_keep_input_order(self):
        a = _closed("A", datetime(2024, 1, 1), datetime(2024, 1, 5))
        b = _closed("B", datetime(2024, 1, 8), datetime(2024, 1, 12))
        report = audit_duration_report([a, b])
        assert report.best.company.name == "A"
