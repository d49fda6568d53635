"""
Required-document resolution.

A facility's checklist depends only on its discharge type and whether it is
classified as low-volume (< 15 m3/day). The rules are a fixed lookup table:

- low-volume entries exist for INDIRECT_PRE, ZLD, INDIRECT_NO_PRE and
  INDIRECT_PRE_NO_SLUDGE;
- DIRECT and NO_DISCHARGE have no low-volume entry and use the standard table
  even when the low-volume flag is set.
"""

from __future__ import annotations

from app.audittrack.constants import DischargeType
from app.audittrack.modules.requirements.catalog import DocumentItem, create_doc

# (instance id, catalog key, augmented with the legal-parameter note)
Requirement = tuple[str, str, bool]

_LOW_VOLUME_INDIRECT: tuple[Requirement, ...] = (
    ("1.1", "1.1", False),
    ("1.2", "1.2_MANDATORY", False),
    ("1.8", "1.8", True),
)

LOW_VOLUME_RULES: dict[DischargeType, tuple[Requirement, ...]] = {
    DischargeType.INDIRECT_PRE: _LOW_VOLUME_INDIRECT,
    DischargeType.ZLD: (
        ("1.1", "1.1", False),
        ("1.2", "1.2_MANDATORY", False),
    ),
    DischargeType.INDIRECT_NO_PRE: _LOW_VOLUME_INDIRECT,
    DischargeType.INDIRECT_PRE_NO_SLUDGE: _LOW_VOLUME_INDIRECT,
}

_STANDARD_WITH_SLUDGE: tuple[Requirement, ...] = (
    ("1.1", "1.1", False),
    ("1.2", "1.2", False),
    ("1.3", "1.3", False),
    ("1.4", "1.4", False),
    ("1.8", "1.8", True),
    ("2.3", "2.3", False),
    ("2.4", "2.4", False),
)

_STANDARD_INDIRECT_NO_SLUDGE: tuple[Requirement, ...] = (
    ("1.1", "1.1", False),
    ("1.2", "1.2", False),
    ("1.3", "1.3", False),
    ("1.4", "1.4", False),
    ("1.8", "1.8", True),
)

STANDARD_RULES: dict[DischargeType, tuple[Requirement, ...]] = {
    DischargeType.DIRECT: (
        ("1.1", "1.1_DIRECT", False),
        ("1.2", "1.2", False),
        ("1.3", "1.3", False),
        ("1.4", "1.4", False),
        ("1.6", "1.6", True),
        ("2.3", "2.3", False),
        ("2.4", "2.4", False),
    ),
    DischargeType.INDIRECT_PRE: _STANDARD_WITH_SLUDGE,
    DischargeType.ZLD: _STANDARD_WITH_SLUDGE,
    DischargeType.INDIRECT_NO_PRE: _STANDARD_INDIRECT_NO_SLUDGE,
    DischargeType.INDIRECT_PRE_NO_SLUDGE: _STANDARD_INDIRECT_NO_SLUDGE,
    DischargeType.NO_DISCHARGE: (
        ("1.1", "1.1_GSM", False),
    ),
}


def unmapped_discharge_types() -> list[DischargeType]:
    """Discharge types with no standard-table entry (should always be empty)."""
    return [t for t in DischargeType if t not in STANDARD_RULES]


_missing = unmapped_discharge_types()
if _missing:
    raise RuntimeError(f"Requirement table has no entry for: {', '.join(t.name for t in _missing)}")


def requirements_for(discharge_type: DischargeType, is_low_volume: bool) -> tuple[Requirement, ...]:
    if is_low_volume and discharge_type in LOW_VOLUME_RULES:
        return LOW_VOLUME_RULES[discharge_type]
    return STANDARD_RULES.get(discharge_type, ())


def resolve(discharge_type: DischargeType, is_low_volume: bool) -> list[DocumentItem]:
    """
    Ordered list of required documents for a facility configuration.
    Every item starts PENDING with empty notes/finding/corrective action.
    """
    return [
        create_doc(doc_id, key, augmented=augmented)
        for doc_id, key, augmented in requirements_for(discharge_type, bool(is_low_volume))
    ]
