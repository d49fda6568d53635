from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.audittrack.models import Base


class CompanyRow(Base):
    """
    One audited company. The document checklist is stored inline as a JSON
    list so a company is always written as a single full record.
    """

    __tablename__ = "companies"
    __table_args__ = (
        Index("idx_companies_name", "name"),
        Index("idx_companies_status", "status"),
        Index("idx_companies_last_updated", "last_updated"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    audit_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")

    discharge_type: Mapped[str] = mapped_column(String(64), nullable=False)
    is_low_volume: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # NO_DOCS -> MISSING_SHARED -> READY_TO_CLOSE -> CLOSED
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="NO_DOCS")

    documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    audit_opening_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    deadline_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    audit_closing_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
