from __future__ import annotations

from flask import Blueprint, current_app

from app.audittrack.modules.analytics.service import ClosedAudit, audit_duration_report
from app.audittrack.modules.companies.service import board_from_app

bp = Blueprint("analytics", __name__)


def _audit_json(a: ClosedAudit | None) -> dict | None:
    if a is None:
        return None
    return {
        "id": a.company.id,
        "name": a.company.name,
        "auditId": a.company.audit_id,
        "auditOpeningDate": a.opened.isoformat(),
        "auditClosingDate": a.closed.isoformat(),
        "businessDays": a.days,
        "band": a.band,
    }


@bp.get("/analytics/durations")
def analytics_durations():
    board = board_from_app(current_app)
    board.refresh()
    report = audit_duration_report(board.companies)
    return {
        "ok": True,
        "totalClosed": report.total_closed,
        "averageDays": report.average_days,
        "monthly": [
            {"key": m.key, "label": m.label, "averageDays": m.average_days, "count": m.count}
            for m in report.monthly
        ],
        "best": _audit_json(report.best),
        "worst": _audit_json(report.worst),
        "history": [_audit_json(a) for a in report.history],
    }
