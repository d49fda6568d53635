"""
Central constants for the AuditTrack application.
"""
from __future__ import annotations

from enum import Enum


class DocStatus(str, Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    ISSUE = "ISSUE"
    NA = "NA"


class DischargeType(str, Enum):
    DIRECT = "Direct Discharge"
    INDIRECT_PRE = "Indirect with Pre-treatment"
    ZLD = "Zero Liquid Discharge (ZLD)"
    INDIRECT_NO_PRE = "Indirect without Pre-treatment"
    INDIRECT_PRE_NO_SLUDGE = "Indirect with Pre-treatment without Sludge"
    NO_DISCHARGE = "No discharge"


class CompanyStatus(str, Enum):
    NO_DOCS = "NO_DOCS"
    MISSING_SHARED = "MISSING_SHARED"
    READY_TO_CLOSE = "READY_TO_CLOSE"
    CLOSED = "CLOSED"


# Statuses that count towards completion
COMPLETED_DOC_STATUSES = frozenset({DocStatus.RECEIVED, DocStatus.NA})

# Statuses listed in follow-up emails
MISSING_DOC_STATUSES = frozenset({DocStatus.PENDING, DocStatus.ISSUE})

STATUS_LABELS = {
    DocStatus.PENDING: "Bekliyor",
    DocStatus.RECEIVED: "Tamamlandı",
    DocStatus.ISSUE: "Eksik/Hatalı",
    DocStatus.NA: "Muaf / Yok",
}

COMPANY_STATUS_LABELS = {
    CompanyStatus.NO_DOCS: "Hiç Evrak İletilmedi",
    CompanyStatus.MISSING_SHARED: "Eksik Evrak Paylaşıldı",
    CompanyStatus.READY_TO_CLOSE: "Kapatılmaya Hazır",
    CompanyStatus.CLOSED: "Denetim Kapatıldı",
}

# New companies start with the most common facility configuration.
DEFAULT_DISCHARGE_TYPE = DischargeType.INDIRECT_PRE
DEFAULT_IS_LOW_VOLUME = False

DEADLINE_EXTENSION_DAYS = 3
DEADLINE_NEAR_DUE_DAYS = 3
DEFAULT_DEADLINE_DAYS = 14


def parse_enum(enum_cls, value, default=None):
    """Look up an enum member by value or by name; None/blank returns `default`."""
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    raw = str(value).strip()
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        pass
    try:
        return enum_cls[raw.upper()]
    except KeyError:
        raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}") from None
