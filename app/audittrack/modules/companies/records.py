"""
Conversion between Company values and flat store records.

Records use the camelCase field names of the hosted document store. Reads
tolerate snake_case keys, ISO-8601 or epoch dates, and missing fields left
behind by older versions of the app.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.audittrack.constants import (
    DEFAULT_DISCHARGE_TYPE,
    CompanyStatus,
    DischargeType,
    DocStatus,
    parse_enum,
)
from app.audittrack.modules.companies.domain import Company
from app.audittrack.modules.requirements.catalog import DocumentItem
from app.audittrack.utils import isoformat_or_none, parse_bool, parse_datetime, utcnow

logger = logging.getLogger(__name__)


def _get(record: dict[str, Any], camel: str, snake: str | None = None) -> Any:
    if camel in record:
        return record[camel]
    if snake and snake in record:
        return record[snake]
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _enum_or_default(enum_cls, value, default, *, field: str, record_id: str):
    try:
        return parse_enum(enum_cls, value, default)
    except ValueError:
        logger.warning("Record %s has invalid %s=%r; using %s", record_id, field, value, default.value)
        return default


def document_from_record(record: dict[str, Any], *, record_id: str = "?") -> DocumentItem:
    return DocumentItem(
        id=_text(record.get("id")),
        name=_text(record.get("name")),
        description=_text(record.get("description")),
        status=_enum_or_default(
            DocStatus, record.get("status"), DocStatus.PENDING, field="document status", record_id=record_id
        ),
        notes=_text(record.get("notes")),
        finding=_text(record.get("finding")),
        corrective_action=_text(_get(record, "correctiveAction", "corrective_action")),
    )


def company_from_record(record: dict[str, Any], now: datetime | None = None) -> Company:
    """
    Build a Company from a stored record, applying read defaults:
    status -> NO_DOCS, dischargeType -> INDIRECT_PRE, isLowVolume -> False,
    auditOpeningDate -> lastUpdated -> now.
    """
    now = now or utcnow()
    record_id = _text(record.get("id"))
    if not record_id:
        raise ValueError("Company record has no id")

    last_updated = parse_datetime(_get(record, "lastUpdated", "last_updated"))
    opening = parse_datetime(_get(record, "auditOpeningDate", "audit_opening_date"))
    raw_docs = record.get("documents") or []
    if not isinstance(raw_docs, list):
        logger.warning("Record %s has non-list documents; treating as empty", record_id)
        raw_docs = []

    return Company(
        id=record_id,
        audit_id=_text(_get(record, "auditId", "audit_id")) or None,
        name=_text(record.get("name")),
        email=_text(record.get("email")),
        discharge_type=_enum_or_default(
            DischargeType,
            _get(record, "dischargeType", "discharge_type"),
            DEFAULT_DISCHARGE_TYPE,
            field="dischargeType",
            record_id=record_id,
        ),
        is_low_volume=parse_bool(_get(record, "isLowVolume", "is_low_volume")),
        status=_enum_or_default(
            CompanyStatus, record.get("status"), CompanyStatus.NO_DOCS, field="status", record_id=record_id
        ),
        documents=tuple(document_from_record(d, record_id=record_id) for d in raw_docs if isinstance(d, dict)),
        audit_opening_date=opening or last_updated or now,
        deadline_date=parse_datetime(_get(record, "deadlineDate", "deadline_date")),
        audit_closing_date=parse_datetime(_get(record, "auditClosingDate", "audit_closing_date")),
        last_updated=last_updated or now,
    )


def document_to_record(doc: DocumentItem) -> dict[str, Any]:
    return {
        "id": doc.id,
        "name": doc.name,
        "description": doc.description,
        "status": doc.status.value,
        "notes": doc.notes,
        "finding": doc.finding,
        "correctiveAction": doc.corrective_action,
    }


def company_to_record(company: Company) -> dict[str, Any]:
    return {
        "id": company.id,
        "auditId": company.audit_id,
        "name": company.name,
        "email": company.email,
        "dischargeType": company.discharge_type.value,
        "isLowVolume": company.is_low_volume,
        "status": company.status.value,
        "documents": [document_to_record(d) for d in company.documents],
        "auditOpeningDate": isoformat_or_none(company.audit_opening_date),
        "deadlineDate": isoformat_or_none(company.deadline_date),
        "auditClosingDate": isoformat_or_none(company.audit_closing_date),
        "lastUpdated": isoformat_or_none(company.last_updated),
    }
