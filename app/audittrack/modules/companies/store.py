"""
Durable company store with snapshot fan-out.

Writes are full-record replaces (last write wins). After every successful
write the complete collection is pushed to all subscribers; a subscriber
replaces its local state with each snapshot rather than merging.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import contextmanager
from typing import Any

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.audittrack.audit import record_event
from app.audittrack.modules.companies.domain import Company
from app.audittrack.modules.companies.models import CompanyRow
from app.audittrack.modules.companies.records import company_from_record, document_to_record

logger = logging.getLogger(__name__)

Snapshot = list[Company]
Listener = Callable[[Snapshot], None]


class StoreError(RuntimeError):
    pass


def row_to_company(row: CompanyRow) -> Company:
    return company_from_record(
        {
            "id": row.id,
            "audit_id": row.audit_id,
            "name": row.name,
            "email": row.email,
            "discharge_type": row.discharge_type,
            "is_low_volume": row.is_low_volume,
            "status": row.status,
            "documents": row.documents or [],
            "audit_opening_date": row.audit_opening_date,
            "deadline_date": row.deadline_date,
            "audit_closing_date": row.audit_closing_date,
            "last_updated": row.last_updated,
        }
    )


def apply_company_to_row(row: CompanyRow, company: Company) -> CompanyRow:
    row.audit_id = company.audit_id
    row.name = company.name
    row.email = company.email
    row.discharge_type = company.discharge_type.value
    row.is_low_volume = company.is_low_volume
    row.status = company.status.value
    row.documents = [document_to_record(d) for d in company.documents]
    row.audit_opening_date = company.audit_opening_date
    row.deadline_date = company.deadline_date
    row.audit_closing_date = company.audit_closing_date
    row.last_updated = company.last_updated
    return row


class CompanyStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._listeners: list[Listener] = []

    @contextmanager
    def _session(self):
        s: Session = self._session_factory()
        try:
            yield s
            s.commit()
        except SQLAlchemyError as e:
            s.rollback()
            logger.exception("Company store operation failed: %s", e)
            raise StoreError(str(e)) from e
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    # ---------- Reads ----------
    def list(self) -> Snapshot:
        """All companies, most recently updated first."""
        with self._session() as s:
            rows = s.query(CompanyRow).order_by(CompanyRow.last_updated.desc()).all()
            return [row_to_company(r) for r in rows]

    def get(self, company_id: str) -> Company | None:
        with self._session() as s:
            row = s.get(CompanyRow, company_id)
            return row_to_company(row) if row else None

    # ---------- Writes ----------
    def save(
        self,
        company: Company,
        *,
        action: str = "company.save",
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Company:
        with self._session() as s:
            row = s.get(CompanyRow, company.id)
            created = row is None
            if created:
                row = CompanyRow(id=company.id)
                s.add(row)
            apply_company_to_row(row, company)
            record_event(
                s,
                action=action,
                entity_type="Company",
                entity_id=company.id,
                reason=reason,
                metadata={"name": company.name, "status": company.status.value, **(metadata or {})},
            )
        logger.info("Saved company id=%s action=%s created=%s", company.id, action, created)
        self._publish()
        return company

    def delete(self, company_id: str, *, reason: str | None = None) -> bool:
        with self._session() as s:
            row = s.get(CompanyRow, company_id)
            if row is None:
                return False
            name = row.name
            s.delete(row)
            record_event(
                s,
                action="company.delete",
                entity_type="Company",
                entity_id=company_id,
                reason=reason,
                metadata={"name": name},
            )
        logger.info("Deleted company id=%s", company_id)
        self._publish()
        return True

    # ---------- Subscriptions ----------
    def subscribe(self, on_change: Listener) -> Callable[[], None]:
        """
        Register `on_change` for full snapshots. The current snapshot is
        delivered immediately. Returns an unsubscribe callable.
        """
        snapshot = self.list()
        self._listeners.append(on_change)
        self._notify(on_change, snapshot)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    def _publish(self) -> None:
        if not self._listeners:
            return
        try:
            snapshot = self.list()
        except StoreError:
            logger.error("Could not load snapshot for %d subscriber(s)", len(self._listeners))
            return
        for listener in list(self._listeners):
            self._notify(listener, snapshot)

    @staticmethod
    def _notify(listener: Listener, snapshot: Snapshot) -> None:
        try:
            listener(list(snapshot))
        except Exception:
            logger.exception("Company snapshot subscriber failed")


def store_from_app(app: Flask) -> CompanyStore:
    store = app.extensions.get("company_store")
    if store is None:
        store = CompanyStore(app.extensions["sqlalchemy_sessionmaker"])
        app.extensions["company_store"] = store
    return store
