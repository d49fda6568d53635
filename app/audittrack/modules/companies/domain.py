"""
Company audit state and its transitions.

Companies and their documents are frozen values. Every mutation is a function
that returns a new Company with `last_updated` bumped; callers persist the
result as a full-record replace. Keeping all transitions here is what keeps
the checklist and closing-date rules enforceable in one place.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from app.audittrack.constants import (
    COMPLETED_DOC_STATUSES,
    DEADLINE_EXTENSION_DAYS,
    DEADLINE_NEAR_DUE_DAYS,
    DEFAULT_DISCHARGE_TYPE,
    DEFAULT_IS_LOW_VOLUME,
    MISSING_DOC_STATUSES,
    CompanyStatus,
    DischargeType,
    DocStatus,
    parse_enum,
)
from app.audittrack.modules.requirements.catalog import DocumentItem
from app.audittrack.modules.requirements.service import resolve
from app.audittrack.utils import parse_datetime, round_half_up, utcnow

EDITABLE_DOC_FIELDS = ("status", "notes", "finding", "corrective_action")


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    email: str
    discharge_type: DischargeType
    is_low_volume: bool
    status: CompanyStatus
    documents: tuple[DocumentItem, ...]
    audit_opening_date: datetime
    last_updated: datetime
    audit_id: str | None = None
    deadline_date: datetime | None = None
    audit_closing_date: datetime | None = None


@dataclass(frozen=True)
class DocumentStats:
    completed: int
    pending: int
    issues: int
    percentage: int


@dataclass(frozen=True)
class DeadlineStatus:
    kind: str  # unset | invalid | overdue | near_due | on_track
    days: int | None
    label: str


def new_company(
    *,
    name: str,
    email: str,
    audit_id: str | None = None,
    audit_opening_date: datetime | None = None,
    deadline_date: datetime | None = None,
    now: datetime | None = None,
) -> Company:
    now = now or utcnow()
    return Company(
        id=str(uuid.uuid4()),
        audit_id=audit_id or None,
        name=name,
        email=email,
        discharge_type=DEFAULT_DISCHARGE_TYPE,
        is_low_volume=DEFAULT_IS_LOW_VOLUME,
        status=CompanyStatus.NO_DOCS,
        documents=tuple(resolve(DEFAULT_DISCHARGE_TYPE, DEFAULT_IS_LOW_VOLUME)),
        audit_opening_date=audit_opening_date or now,
        deadline_date=deadline_date,
        last_updated=now,
    )


def merge_documents(existing: Iterable[DocumentItem], resolved: Iterable[DocumentItem]) -> tuple[DocumentItem, ...]:
    """
    Carry user-entered fields over to a freshly resolved checklist.
    Output order follows `resolved`; ids missing from `resolved` are dropped.
    """
    by_id = {d.id: d for d in existing}
    merged = []
    for doc in resolved:
        old = by_id.get(doc.id)
        if old is None:
            merged.append(doc)
            continue
        merged.append(
            replace(
                doc,
                status=old.status,
                notes=old.notes,
                finding=old.finding,
                corrective_action=old.corrective_action,
            )
        )
    return tuple(merged)


def reconfigure(
    company: Company,
    discharge_type: DischargeType,
    is_low_volume: bool,
    now: datetime | None = None,
) -> Company:
    documents = merge_documents(company.documents, resolve(discharge_type, is_low_volume))
    return replace(
        company,
        discharge_type=discharge_type,
        is_low_volume=bool(is_low_volume),
        documents=documents,
        last_updated=now or utcnow(),
    )


def completion_percentage(documents: Sequence[DocumentItem]) -> int:
    total = len(documents)
    if total == 0:
        return 100
    completed = sum(1 for d in documents if d.status in COMPLETED_DOC_STATUSES)
    return int(round_half_up(100 * completed / total))


def missing_documents(documents: Iterable[DocumentItem]) -> list[DocumentItem]:
    return [d for d in documents if d.status in MISSING_DOC_STATUSES]


def document_stats(documents: Sequence[DocumentItem]) -> DocumentStats:
    return DocumentStats(
        completed=sum(1 for d in documents if d.status in COMPLETED_DOC_STATUSES),
        pending=sum(1 for d in documents if d.status == DocStatus.PENDING),
        issues=sum(1 for d in documents if d.status == DocStatus.ISSUE),
        percentage=completion_percentage(documents),
    )


def set_status(company: Company, new_status: CompanyStatus, now: datetime | None = None) -> Company:
    """
    Move the audit to `new_status`.

    Entering CLOSED stamps the closing date unless one is already set;
    any other status clears it.
    """
    now = now or utcnow()
    closing = company.audit_closing_date
    if new_status == CompanyStatus.CLOSED:
        if closing is None:
            closing = now
    else:
        closing = None
    return replace(company, status=new_status, audit_closing_date=closing, last_updated=now)


def update_document(company: Company, doc_id: str, now: datetime | None = None, **fields) -> Company:
    unknown = set(fields) - set(EDITABLE_DOC_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported document fields: {', '.join(sorted(unknown))}")
    if "status" in fields:
        fields["status"] = parse_enum(DocStatus, fields["status"])
        if fields["status"] is None:
            raise ValueError("Document status is required.")
    for key in ("notes", "finding", "corrective_action"):
        if key in fields:
            fields[key] = fields[key] or ""

    if not any(d.id == doc_id for d in company.documents):
        raise LookupError(f"Document {doc_id!r} is not on this company's checklist")
    documents = tuple(replace(d, **fields) if d.id == doc_id else d for d in company.documents)
    return replace(company, documents=documents, last_updated=now or utcnow())


def set_deadline(company: Company, deadline: object, now: datetime | None = None) -> Company:
    """Set or clear the deadline; an unparseable value clears it."""
    return replace(company, deadline_date=parse_datetime(deadline), last_updated=now or utcnow())


def extend_deadline(company: Company, now: datetime | None = None) -> Company:
    """Push the deadline back three calendar days. No deadline, no change."""
    current = parse_datetime(company.deadline_date)
    if current is None:
        return company
    return replace(
        company,
        deadline_date=current + timedelta(days=DEADLINE_EXTENSION_DAYS),
        last_updated=now or utcnow(),
    )


def force_terminate(company: Company, now: datetime | None = None) -> Company:
    """Deadline expired: close the audit with the missing-documents outcome."""
    now = now or utcnow()
    return replace(company, status=CompanyStatus.MISSING_SHARED, audit_closing_date=now, last_updated=now)


def days_until(deadline: datetime, now: datetime) -> int:
    return math.ceil((deadline - now).total_seconds() / 86400)


def classify_deadline(deadline: object, now: datetime | None = None) -> DeadlineStatus:
    if deadline is None or (isinstance(deadline, str) and not deadline.strip()):
        return DeadlineStatus(kind="unset", days=None, label="Belirlenmedi")
    d = parse_datetime(deadline)
    if d is None:
        return DeadlineStatus(kind="invalid", days=None, label="Hatalı Tarih")

    days = days_until(d, now or utcnow())
    if days < 0:
        return DeadlineStatus(kind="overdue", days=days, label=f"{abs(days)} Gün Gecikti")
    if days <= DEADLINE_NEAR_DUE_DAYS:
        return DeadlineStatus(kind="near_due", days=days, label=f"{days} Gün Kaldı")
    return DeadlineStatus(kind="on_track", days=days, label=f"{days} Gün Kaldı")


def search_companies(companies: Iterable[Company], term: str | None) -> list[Company]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(companies)
    return [
        c
        for c in companies
        if needle in c.name.lower() or (c.audit_id and needle in c.audit_id.lower())
    ]


def sort_by_opening_date(companies: Iterable[Company]) -> list[Company]:
    """Oldest audit first."""
    return sorted(companies, key=lambda c: c.audit_opening_date)
