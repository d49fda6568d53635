from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from flask import Flask

from app.audittrack.constants import (
    COMPANY_STATUS_LABELS,
    DEFAULT_DEADLINE_DAYS,
    STATUS_LABELS,
    CompanyStatus,
    DischargeType,
    parse_enum,
)
from app.audittrack.modules.companies.board import Board
from app.audittrack.modules.companies.domain import (
    EDITABLE_DOC_FIELDS,
    Company,
    classify_deadline,
    document_stats,
    missing_documents,
    new_company,
)
from app.audittrack.modules.companies.records import company_to_record
from app.audittrack.modules.companies.store import store_from_app
from app.audittrack.utils import parse_bool, parse_datetime, utcnow

# API field name -> domain field name
DOC_FIELD_ALIASES = {
    "status": "status",
    "notes": "notes",
    "finding": "finding",
    "correctiveAction": "corrective_action",
    "corrective_action": "corrective_action",
}


def is_confirmed(value: Any) -> bool:
    return parse_bool(value)


def _has_value(payload: dict, key: str) -> bool:
    return bool(str(payload.get(key) or "").strip())


def validate_company_payload(payload: dict) -> list[str]:
    """Validate company creation payload. Returns list of errors."""
    errors = []
    if not _has_value(payload, "name"):
        errors.append("Name is required.")
    if not _has_value(payload, "email"):
        errors.append("Email is required.")
    for key in ("auditOpeningDate", "deadlineDate"):
        if _has_value(payload, key) and parse_datetime(payload.get(key)) is None:
            errors.append(f"{key} is not a valid date.")
    return errors


def company_from_payload(payload: dict, now: datetime | None = None) -> Company:
    now = now or utcnow()
    opening = parse_datetime(payload.get("auditOpeningDate")) or now
    deadline = parse_datetime(payload.get("deadlineDate"))
    if "deadlineDate" not in payload:
        deadline = opening + timedelta(days=DEFAULT_DEADLINE_DAYS)
    return new_company(
        name=str(payload.get("name")).strip(),
        email=str(payload.get("email")).strip(),
        audit_id=(str(payload.get("auditId") or "").strip() or None),
        audit_opening_date=opening,
        deadline_date=deadline,
        now=now,
    )


def parse_configuration(payload: dict, company: Company) -> tuple[DischargeType, bool]:
    """New (discharge type, low-volume) pair; omitted keys keep the current value."""
    discharge_type = parse_enum(DischargeType, payload.get("dischargeType"), company.discharge_type)
    raw_low = payload.get("isLowVolume")
    is_low_volume = company.is_low_volume if raw_low is None else is_confirmed(raw_low)
    return discharge_type, is_low_volume


def parse_status(payload: dict) -> CompanyStatus:
    status = parse_enum(CompanyStatus, payload.get("status"))
    if status is None:
        raise ValueError("status is required.")
    return status


def parse_document_fields(payload: dict) -> dict[str, Any]:
    fields = {}
    for key, value in payload.items():
        target = DOC_FIELD_ALIASES.get(key)
        if target in EDITABLE_DOC_FIELDS:
            fields[target] = value
    if not fields:
        raise ValueError("Nothing to update. Send status, notes, finding or correctiveAction.")
    return fields


def company_to_json(company: Company, *, now: datetime | None = None, unsynced: bool = False) -> dict[str, Any]:
    data = company_to_record(company)
    data["dischargeTypeKey"] = company.discharge_type.name
    data["statusLabel"] = COMPANY_STATUS_LABELS[company.status]
    for doc_json, doc in zip(data["documents"], company.documents):
        doc_json["statusLabel"] = STATUS_LABELS[doc.status]
    stats = document_stats(company.documents)
    data["stats"] = {
        "completed": stats.completed,
        "pending": stats.pending,
        "issues": stats.issues,
        "percentage": stats.percentage,
    }
    data["missingDocuments"] = [d.id for d in missing_documents(company.documents)]
    deadline = classify_deadline(company.deadline_date, now)
    data["deadline"] = {"kind": deadline.kind, "days": deadline.days, "label": deadline.label}
    data["unsynced"] = unsynced
    return data


def board_from_app(app: Flask) -> Board:
    """Process-wide board, subscribed to the store on first use."""
    board = app.extensions.get("company_board")
    if board is None:
        board = Board(store_from_app(app))
        app.extensions["company_board"] = board
    board.start()
    return board
