"""
JSON routes for company audits.

Every edit runs a transition from `domain` through the board, which persists
the full record. Deleting a company, extending a deadline and force-closing an
audit only take effect when the request carries `confirm=true`.
"""

from __future__ import annotations

import json
from functools import partial

from flask import Blueprint, abort, current_app, request

from app.audittrack.constants import DischargeType, parse_enum
from app.audittrack.db import db_session
from app.audittrack.models import AuditEvent
from app.audittrack.modules.companies.board import Board, Notice
from app.audittrack.modules.companies.domain import (
    Company,
    extend_deadline,
    force_terminate,
    reconfigure,
    search_companies,
    set_deadline,
    set_status,
    sort_by_opening_date,
    update_document,
)
from app.audittrack.modules.companies.records import document_to_record
from app.audittrack.modules.companies.service import (
    board_from_app,
    company_from_payload,
    company_to_json,
    is_confirmed,
    parse_configuration,
    parse_document_fields,
    parse_status,
    validate_company_payload,
)
from app.audittrack.modules.followup.service import client_from_config, generate_followup_email
from app.audittrack.modules.requirements.service import resolve

bp = Blueprint("companies", __name__)

EXTEND_CONFIRM_MESSAGE = "Teslim tarihi 3 gün uzatılacak. Onaylıyor musunuz?"
TERMINATE_CONFIRM_MESSAGE = (
    'Süre dolduğu için denetim "Eksik Evrak Paylaşıldı" olarak kapatılacak. Onaylıyor musunuz?'
)
DELETE_CONFIRM_MESSAGE = "Bu firmayı silmek istediğinize emin misiniz?"


def _payload() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _board() -> Board:
    board = board_from_app(current_app)
    board.refresh()
    return board


def _get_company_or_404(board: Board, company_id: str) -> Company:
    c = board.get(company_id)
    if not c:
        abort(404)
    return c


def _company_response(board: Board, company: Company, notice: Notice, status_code: int = 200):
    body = {
        "ok": notice.level != "danger",
        "message": notice.message,
        "company": company_to_json(company, unsynced=company.id in board.unsynced_ids),
    }
    if notice.level == "danger":
        # Store write failed; the edit is kept locally and returned to the client.
        return body, 503
    return body, status_code


def _bad_request(*errors: str):
    return {"ok": False, "errors": list(errors)}, 400


def _confirmation_required(message: str):
    return {"ok": False, "confirmationRequired": True, "message": message}, 409


def _apply(board: Board, company_id: str, transition, action: str):
    _get_company_or_404(board, company_id)
    company, notice = board.apply(company_id, transition, action=action)
    return _company_response(board, company, notice)


# ---------- List / Create ----------
@bp.get("/companies")
def companies_list():
    board = _board()
    search = (request.args.get("q") or "").strip()
    companies = sort_by_opening_date(search_companies(board.companies, search))
    unsynced = board.unsynced_ids
    return {
        "ok": True,
        "companies": [company_to_json(c, unsynced=c.id in unsynced) for c in companies],
        "search": search,
    }


@bp.post("/companies")
def companies_create():
    payload = _payload()
    errors = validate_company_payload(payload)
    if errors:
        return _bad_request(*errors)

    board = _board()
    company = company_from_payload(payload)
    notice = board.add(company)
    return _company_response(board, company, notice, status_code=201)


# ---------- Detail ----------
@bp.get("/companies/<company_id>")
def company_detail(company_id: str):
    board = _board()
    company = _get_company_or_404(board, company_id)
    return {"ok": True, "company": company_to_json(company, unsynced=company.id in board.unsynced_ids)}


# ---------- Configuration / Status ----------
@bp.patch("/companies/<company_id>/configuration")
def company_configuration(company_id: str):
    board = _board()
    company = _get_company_or_404(board, company_id)
    try:
        discharge_type, is_low_volume = parse_configuration(_payload(), company)
    except ValueError as e:
        return _bad_request(str(e))
    return _apply(
        board,
        company_id,
        lambda c: reconfigure(c, discharge_type, is_low_volume),
        action="company.configure",
    )


@bp.patch("/companies/<company_id>/status")
def company_status(company_id: str):
    try:
        new_status = parse_status(_payload())
    except ValueError as e:
        return _bad_request(str(e))
    return _apply(_board(), company_id, lambda c: set_status(c, new_status), action="company.status")


# ---------- Deadline ----------
@bp.patch("/companies/<company_id>/deadline")
def company_deadline(company_id: str):
    payload = _payload()
    if "deadlineDate" not in payload:
        return _bad_request("deadlineDate is required (null clears it).")
    return _apply(_board(), company_id, lambda c: set_deadline(c, payload.get("deadlineDate")), action="company.deadline")


@bp.post("/companies/<company_id>/deadline/extend")
def company_deadline_extend(company_id: str):
    if not is_confirmed(_payload().get("confirm") or request.args.get("confirm")):
        return _confirmation_required(EXTEND_CONFIRM_MESSAGE)
    return _apply(_board(), company_id, extend_deadline, action="company.deadline_extend")


@bp.post("/companies/<company_id>/terminate")
def company_terminate(company_id: str):
    if not is_confirmed(_payload().get("confirm") or request.args.get("confirm")):
        return _confirmation_required(TERMINATE_CONFIRM_MESSAGE)
    return _apply(_board(), company_id, force_terminate, action="company.terminate")


# ---------- Documents ----------
@bp.patch("/companies/<company_id>/documents/<doc_id>")
def company_document_update(company_id: str, doc_id: str):
    board = _board()
    company = _get_company_or_404(board, company_id)
    if not any(d.id == doc_id for d in company.documents):
        abort(404)
    try:
        fields = parse_document_fields(_payload())
        # Validate before handing the transition to the board.
        update_document(company, doc_id, **fields)
    except ValueError as e:
        return _bad_request(str(e))
    return _apply(board, company_id, partial(update_document, doc_id=doc_id, **fields), action="company.document")


# ---------- Delete ----------
@bp.delete("/companies/<company_id>")
def company_delete(company_id: str):
    board = _board()
    _get_company_or_404(board, company_id)
    confirmed = is_confirmed(request.args.get("confirm") or _payload().get("confirm"))
    if not confirmed:
        return _confirmation_required(DELETE_CONFIRM_MESSAGE)
    notice = board.delete(company_id, confirmed=True)
    if notice.level == "danger":
        return {"ok": False, "message": notice.message}, 503
    return {"ok": True, "message": notice.message}


# ---------- Follow-up email ----------
@bp.post("/companies/<company_id>/followup-email")
def company_followup_email(company_id: str):
    board = _board()
    company = _get_company_or_404(board, company_id)
    text = generate_followup_email(company, client_from_config(current_app.config))
    return {"ok": True, "email": text}


# ---------- Requirements preview ----------
@bp.get("/requirements")
def requirements_preview():
    try:
        discharge_type = parse_enum(DischargeType, request.args.get("dischargeType"))
    except ValueError as e:
        return _bad_request(str(e))
    if discharge_type is None:
        return _bad_request("dischargeType is required.")
    is_low_volume = is_confirmed(request.args.get("isLowVolume"))
    return {
        "ok": True,
        "dischargeType": discharge_type.value,
        "isLowVolume": is_low_volume,
        "documents": [document_to_record(d) for d in resolve(discharge_type, is_low_volume)],
    }


# ---------- Change history ----------
@bp.get("/companies/<company_id>/events")
def company_events(company_id: str):
    # Deleted companies keep their history, so no board lookup here.
    s = db_session()
    events = (
        s.query(AuditEvent)
        .filter(AuditEvent.entity_type == "Company", AuditEvent.entity_id == company_id)
        .order_by(AuditEvent.created_at.desc(), AuditEvent.id.desc())
        .limit(200)
        .all()
    )
    return {
        "ok": True,
        "events": [
            {
                "action": e.action,
                "createdAt": e.created_at.isoformat() if e.created_at else None,
                "requestId": e.request_id,
                "reason": e.reason,
                "metadata": json.loads(e.metadata_json) if e.metadata_json else None,
            }
            for e in events
        ],
    }
