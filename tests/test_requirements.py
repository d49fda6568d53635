"""
Unit tests for required-document resolution.

Tests cover:
- Every (discharge type, low-volume) combination
- Legal-parameter note on analysis reports
- Low-volume fallback for DIRECT and NO_DISCHARGE
- Table exhaustiveness
"""

import pytest

from app.audittrack.constants import DischargeType, DocStatus
from app.audittrack.modules.requirements.catalog import LEGAL_PARAM_NOTE, MASTER_DOCS, create_doc, get_definition
from app.audittrack.modules.requirements.service import (
    LOW_VOLUME_RULES,
    STANDARD_RULES,
    resolve,
    unmapped_discharge_types,
)


def _ids(discharge_type, is_low_volume):
    return [d.id for d in resolve(discharge_type, is_low_volume)]


class TestResolveStandard:
    """Tests for resolve() with is_low_volume=False"""

    def test_direct(self):
        assert _ids(DischargeType.DIRECT, False) == ["1.1", "1.2", "1.3", "1.4", "1.6", "2.3", "2.4"]

    def test_indirect_with_pretreatment(self):
        assert _ids(DischargeType.INDIRECT_PRE, False) == ["1.1", "1.2", "1.3", "1.4", "1.8", "2.3", "2.4"]

    def test_zld(self):
        assert _ids(DischargeType.ZLD, False) == ["1.1", "1.2", "1.3", "1.4", "1.8", "2.3", "2.4"]

    def test_indirect_without_sludge(self):
        assert _ids(DischargeType.INDIRECT_NO_PRE, False) == ["1.1", "1.2", "1.3", "1.4", "1.8"]
        assert _ids(DischargeType.INDIRECT_PRE_NO_SLUDGE, False) == ["1.1", "1.2", "1.3", "1.4", "1.8"]

    def test_no_discharge(self):
        docs = resolve(DischargeType.NO_DISCHARGE, False)
        assert [d.id for d in docs] == ["1.1"]
        assert docs[0].name == "1.1 GSMR Görüşü"

    def test_direct_uses_discharge_permit_variant(self):
        first = resolve(DischargeType.DIRECT, False)[0]
        assert first.id == "1.1"
        assert first.name == "1.1 Atıksu Deşarj İzin Belgesi"


class TestResolveLowVolume:
    """Tests for resolve() with is_low_volume=True"""

    @pytest.mark.parametrize(
        "discharge_type",
        [DischargeType.INDIRECT_PRE, DischargeType.INDIRECT_NO_PRE, DischargeType.INDIRECT_PRE_NO_SLUDGE],
    )
    def test_indirect_low_volume(self, discharge_type):
        docs = resolve(discharge_type, True)
        assert [d.id for d in docs] == ["1.1", "1.2", "1.8"]
        # Discharge records become mandatory below 15 m3/day
        assert "Zorunlu" in docs[1].description

    def test_zld_low_volume(self):
        assert _ids(DischargeType.ZLD, True) == ["1.1", "1.2"]

    def test_direct_falls_back_to_standard(self):
        """DIRECT has no low-volume entry; flag is ignored"""
        assert _ids(DischargeType.DIRECT, True) == _ids(DischargeType.DIRECT, False)

    def test_no_discharge_falls_back_to_standard(self):
        assert _ids(DischargeType.NO_DISCHARGE, True) == ["1.1"]


class TestDocumentItems:
    """Tests for the items resolve() produces"""

    def test_fresh_items_are_pending_and_blank(self):
        for t in DischargeType:
            for low in (False, True):
                for d in resolve(t, low):
                    assert d.status == DocStatus.PENDING
                    assert d.notes == ""
                    assert d.finding == ""
                    assert d.corrective_action == ""

    def test_analysis_reports_carry_legal_note(self):
        docs = {d.id: d for d in resolve(DischargeType.INDIRECT_PRE, False)}
        assert docs["1.8"].description.endswith(LEGAL_PARAM_NOTE)
        assert not docs["1.1"].description.endswith(LEGAL_PARAM_NOTE)

        direct = {d.id: d for d in resolve(DischargeType.DIRECT, False)}
        assert direct["1.6"].description == get_definition("1.6").description + LEGAL_PARAM_NOTE

    def test_resolve_is_deterministic(self):
        assert resolve(DischargeType.ZLD, False) == resolve(DischargeType.ZLD, False)

    def test_unknown_definition_raises(self):
        with pytest.raises(KeyError):
            create_doc("9.9", "9.9")


class TestTables:
    """Tests for the rule tables themselves"""

    def test_every_discharge_type_has_standard_entry(self):
        assert unmapped_discharge_types() == []
        assert set(STANDARD_RULES) == set(DischargeType)

    def test_every_rule_references_catalog(self):
        for rules in (STANDARD_RULES, LOW_VOLUME_RULES):
            for entries in rules.values():
                for _doc_id, key, _augmented in entries:
                    assert key in MASTER_DOCS

    def test_catalog_has_twelve_definitions(self):
        assert len(MASTER_DOCS) == 12
