"""
In-memory owner of the company collection.

The board subscribes to the store and replaces its collection with every
snapshot. User edits go through `apply()`, which takes a transition function
from `domain` and persists the resulting full record. If the write fails the
edited record stays in the local collection (marked unsynced) and a notice is
returned, so the edit is never silently lost. A company that disappears from
the store is gone from the board too, unsynced edit or not.

One board is shared by all request threads of a worker; state changes happen
under `self._lock`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from app.audittrack.modules.companies.domain import Company
from app.audittrack.modules.companies.store import CompanyStore, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    level: str  # "success" | "info" | "danger"
    message: str


class Board:
    def __init__(self, store: CompanyStore) -> None:
        self._store = store
        # Re-entrant: a save inside _write pushes a snapshot back into _on_snapshot.
        self._lock = threading.RLock()
        self._companies: list[Company] = []
        self._stored_ids: set[str] = set()
        self._unsynced: dict[str, Company] = {}
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def companies(self) -> list[Company]:
        return list(self._companies)

    @property
    def unsynced_ids(self) -> set[str]:
        with self._lock:
            return set(self._unsynced)

    def get(self, company_id: str) -> Company | None:
        for c in self._companies:
            if c.id == company_id:
                return c
        return None

    def start(self) -> None:
        with self._lock:
            if self._unsubscribe is None:
                self._unsubscribe = self._store.subscribe(self._on_snapshot)

    def refresh(self) -> None:
        """Pull a fresh snapshot; other processes may have written since the last push."""
        snapshot = self._store.list()
        self._on_snapshot(snapshot)

    def stop(self) -> None:
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None

    def _on_snapshot(self, snapshot: list[Company]) -> None:
        # Each push replaces local state. Edits whose save failed are laid back
        # on top until the store holds a record at least as new. An edit to a
        # company the store used to hold but no longer does was deleted elsewhere
        # and is dropped; an edit never stored yet (failed create) is kept.
        with self._lock:
            companies = list(snapshot)
            by_id = {c.id: c for c in companies}
            previously_stored = self._stored_ids
            for company_id, edited in list(self._unsynced.items()):
                stored = by_id.get(company_id)
                if stored is None:
                    if company_id in previously_stored:
                        logger.warning("Dropping unsynced edit for deleted company id=%s", company_id)
                        self._unsynced.pop(company_id, None)
                        continue
                elif stored.last_updated >= edited.last_updated:
                    self._unsynced.pop(company_id, None)
                    continue
                companies = _with_replaced(companies, edited)
            self._stored_ids = set(by_id)
            self._companies = companies

    def _replace_local(self, company: Company) -> None:
        self._companies = _with_replaced(self._companies, company)

    def add(self, company: Company) -> Notice:
        return self._write(company, action="company.create")

    def apply(
        self,
        company_id: str,
        transition: Callable[[Company], Company],
        *,
        action: str = "company.update",
    ) -> tuple[Company, Notice]:
        with self._lock:
            current = self.get(company_id)
            if current is None:
                raise LookupError(f"Unknown company {company_id!r}")
            updated = transition(current)
            if updated is current:
                return current, Notice("info", "No change.")
            return updated, self._write(updated, action=action)

    def _write(self, company: Company, *, action: str) -> Notice:
        with self._lock:
            self._replace_local(company)
            try:
                self._store.save(company, action=action)
            except StoreError as e:
                logger.error("Save failed for company id=%s; keeping local edit: %s", company.id, e)
                self._unsynced[company.id] = company
                return Notice("danger", f"Kaydedilemedi: {e}")
            return Notice("success", "Saved.")

    def retry_unsynced(self) -> list[Notice]:
        """Try to persist every edit whose earlier save failed."""
        notices = []
        with self._lock:
            for company in list(self._unsynced.values()):
                notice = self._write(company, action="company.retry")
                if notice.level == "success":
                    self._unsynced.pop(company.id, None)
                notices.append(notice)
        return notices

    def delete(self, company_id: str, *, confirmed: bool) -> Notice:
        if not confirmed:
            return Notice("danger", "Bu firmayı silmek istediğinize emin misiniz?")
        with self._lock:
            try:
                self._store.delete(company_id)
            except StoreError as e:
                logger.error("Delete failed for company id=%s: %s", company_id, e)
                return Notice("danger", f"Silinemedi: {e}")
            self._companies = [c for c in self._companies if c.id != company_id]
            self._stored_ids.discard(company_id)
            self._unsynced.pop(company_id, None)
            return Notice("success", "Deleted.")


def _with_replaced(companies: list[Company], company: Company) -> list[Company]:
    """Copy of `companies` with `company` swapped in by id, or prepended if new."""
    out = list(companies)
    for i, c in enumerate(out):
        if c.id == company.id:
            out[i] = company
            return out
    out.insert(0, company)
    return out
