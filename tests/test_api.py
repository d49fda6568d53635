"""Tests for the company and analytics JSON API."""
import pytest

from app.audittrack import create_app
from app.audittrack.models import Base
from app.audittrack.modules.followup.service import MISSING_KEY_MESSAGE


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    for k in ("GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(k, raising=False)

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    return app.test_client()


def _create(client, **overrides):
    payload = {
        "name": "Acme Tekstil",
        "email": "qa@acme.test",
        "auditId": "A-100",
        "auditOpeningDate": "2024-01-01",
    }
    payload.update(overrides)
    r = client.post("/api/companies", json=payload)
    assert r.status_code == 201, r.json
    return r.json["company"]


def _docs(company):
    return [d["id"] for d in company["documents"]]


def test_create_company_defaults(client):
    c = _create(client)
    assert c["dischargeType"] == "Indirect with Pre-treatment"
    assert c["dischargeTypeKey"] == "INDIRECT_PRE"
    assert c["isLowVolume"] is False
    assert c["status"] == "NO_DOCS"
    assert c["statusLabel"] == "Hiç Evrak İletilmedi"
    assert _docs(c) == ["1.1", "1.2", "1.3", "1.4", "1.8", "2.3", "2.4"]
    assert c["auditOpeningDate"] == "2024-01-01T00:00:00"
    assert c["deadlineDate"] == "2024-01-15T00:00:00"
    assert c["stats"]["percentage"] == 0
    assert c["missingDocuments"] == _docs(c)
    assert c["unsynced"] is False


def test_create_company_validation(client):
    r = client.post("/api/companies", json={"email": "qa@acme.test", "auditOpeningDate": "yesterday"})
    assert r.status_code == 400
    assert "Name is required." in r.json["errors"]
    assert "auditOpeningDate is not a valid date." in r.json["errors"]


def test_create_without_deadline(client):
    c = _create(client, deadlineDate=None)
    assert c["deadlineDate"] is None
    assert c["deadline"]["kind"] == "unset"


def test_list_and_search(client):
    _create(client, name="Boya Sanayi", auditId="B-2", auditOpeningDate="2024-03-01")
    _create(client, name="Acme Tekstil", auditId="A-1", auditOpeningDate="2024-01-01")

    r = client.get("/api/companies")
    assert r.status_code == 200
    assert [c["name"] for c in r.json["companies"]] == ["Acme Tekstil", "Boya Sanayi"]

    r = client.get("/api/companies?q=boya")
    assert [c["name"] for c in r.json["companies"]] == ["Boya Sanayi"]


def test_detail_and_404(client):
    c = _create(client)
    r = client.get(f"/api/companies/{c['id']}")
    assert r.status_code == 200
    assert r.json["company"]["id"] == c["id"]

    r = client.get("/api/companies/does-not-exist")
    assert r.status_code == 404
    assert r.json["ok"] is False


def test_reconfigure_preserves_document_progress(client):
    c = _create(client)
    r = client.patch(f"/api/companies/{c['id']}/documents/1.1", json={"status": "RECEIVED", "notes": "Geldi"})
    assert r.status_code == 200

    r = client.patch(f"/api/companies/{c['id']}/configuration", json={"dischargeType": "ZLD", "isLowVolume": True})
    assert r.status_code == 200
    updated = r.json["company"]
    assert updated["dischargeType"] == "Zero Liquid Discharge (ZLD)"
    assert updated["isLowVolume"] is True
    assert _docs(updated) == ["1.1", "1.2"]
    assert updated["documents"][0]["status"] == "RECEIVED"
    assert updated["documents"][0]["notes"] == "Geldi"
    assert updated["stats"]["percentage"] == 50


def test_reconfigure_rejects_unknown_type(client):
    c = _create(client)
    r = client.patch(f"/api/companies/{c['id']}/configuration", json={"dischargeType": "Sea outfall"})
    assert r.status_code == 400


def test_document_update(client):
    c = _create(client)
    r = client.patch(
        f"/api/companies/{c['id']}/documents/1.3",
        json={"status": "ISSUE", "finding": "Ekran görüntüsü eski", "correctiveAction": "Güncel görüntü"},
    )
    assert r.status_code == 200
    doc = next(d for d in r.json["company"]["documents"] if d["id"] == "1.3")
    assert doc["status"] == "ISSUE"
    assert doc["statusLabel"] == "Eksik/Hatalı"
    assert doc["finding"] == "Ekran görüntüsü eski"
    assert doc["correctiveAction"] == "Güncel görüntü"

    r = client.patch(f"/api/companies/{c['id']}/documents/1.3", json={"status": "DONE"})
    assert r.status_code == 400

    r = client.patch(f"/api/companies/{c['id']}/documents/9.9", json={"status": "RECEIVED"})
    assert r.status_code == 404


def test_status_closing_date(client):
    c = _create(client)
    r = client.patch(f"/api/companies/{c['id']}/status", json={"status": "CLOSED"})
    assert r.status_code == 200
    closed = r.json["company"]
    assert closed["status"] == "CLOSED"
    assert closed["auditClosingDate"] is not None

    r = client.patch(f"/api/companies/{c['id']}/status", json={"status": "READY_TO_CLOSE"})
    assert r.json["company"]["auditClosingDate"] is None

    client.patch(f"/api/companies/{c['id']}/status", json={"status": "CLOSED"})
    r = client.patch(f"/api/companies/{c['id']}/status", json={"status": "MISSING_SHARED"})
    assert r.json["company"]["status"] == "MISSING_SHARED"
    assert r.json["company"]["auditClosingDate"] is None

    r = client.patch(f"/api/companies/{c['id']}/status", json={"status": "ARCHIVED"})
    assert r.status_code == 400


def test_set_deadline(client):
    c = _create(client)
    r = client.patch(f"/api/companies/{c['id']}/deadline", json={"deadlineDate": "2024-02-01"})
    assert r.status_code == 200
    assert r.json["company"]["deadlineDate"] == "2024-02-01T00:00:00"

    r = client.patch(f"/api/companies/{c['id']}/deadline", json={})
    assert r.status_code == 400


def test_extend_deadline_requires_confirmation(client):
    c = _create(client, deadlineDate="2024-06-01")

    r = client.post(f"/api/companies/{c['id']}/deadline/extend", json={})
    assert r.status_code == 409
    assert r.json["confirmationRequired"] is True
    r = client.get(f"/api/companies/{c['id']}")
    assert r.json["company"]["deadlineDate"] == "2024-06-01T00:00:00"

    r = client.post(f"/api/companies/{c['id']}/deadline/extend", json={"confirm": True})
    assert r.status_code == 200
    assert r.json["company"]["deadlineDate"] == "2024-06-04T00:00:00"


def test_terminate_requires_confirmation(client):
    c = _create(client)

    r = client.post(f"/api/companies/{c['id']}/terminate")
    assert r.status_code == 409
    r = client.get(f"/api/companies/{c['id']}")
    assert r.json["company"]["status"] == "NO_DOCS"

    r = client.post(f"/api/companies/{c['id']}/terminate?confirm=true")
    assert r.status_code == 200
    assert r.json["company"]["status"] == "MISSING_SHARED"
    assert r.json["company"]["auditClosingDate"] is not None


def test_delete_requires_confirmation(client):
    c = _create(client)

    r = client.delete(f"/api/companies/{c['id']}")
    assert r.status_code == 409
    assert client.get(f"/api/companies/{c['id']}").status_code == 200

    r = client.delete(f"/api/companies/{c['id']}?confirm=true")
    assert r.status_code == 200
    assert client.get(f"/api/companies/{c['id']}").status_code == 404


def test_followup_email_without_api_key(client):
    c = _create(client)
    r = client.post(f"/api/companies/{c['id']}/followup-email")
    assert r.status_code == 200
    assert r.json["email"] == MISSING_KEY_MESSAGE


def test_events_history(client):
    c = _create(client)
    client.patch(f"/api/companies/{c['id']}/status", json={"status": "MISSING_SHARED"})
    r = client.get(f"/api/companies/{c['id']}/events", headers={"X-Request-ID": "req-42"})
    assert r.status_code == 200
    actions = [e["action"] for e in r.json["events"]]
    assert actions == ["company.status", "company.create"]
    assert r.json["events"][0]["metadata"]["status"] == "MISSING_SHARED"


def test_analytics_durations(client):
    closed = _create(client, name="Kapalı", auditOpeningDate="2024-01-01")
    _create(client, name="Açık", auditOpeningDate="2024-01-01")
    client.patch(f"/api/companies/{closed['id']}/status", json={"status": "CLOSED"})

    r = client.get("/api/analytics/durations")
    assert r.status_code == 200
    body = r.json
    assert body["totalClosed"] == 1
    assert body["best"]["id"] == closed["id"]
    assert body["worst"]["id"] == closed["id"]
    assert body["best"]["businessDays"] >= 1
    assert len(body["monthly"]) == 1
    assert [h["id"] for h in body["history"]] == [closed["id"]]


def test_analytics_empty(client):
    r = client.get("/api/analytics/durations")
    assert r.json["totalClosed"] == 0
    assert r.json["averageDays"] == 0.0
    assert r.json["best"] is None


def test_requirements_preview(client):
    r = client.get("/api/requirements?dischargeType=DIRECT&isLowVolume=true")
    assert r.status_code == 200
    assert [d["id"] for d in r.json["documents"]] == ["1.1", "1.2", "1.3", "1.4", "1.6", "2.3", "2.4"]
    assert r.json["documents"][0]["name"] == "1.1 Atıksu Deşarj İzin Belgesi"

    r = client.get("/api/requirements?dischargeType=ZLD&isLowVolume=1")
    assert [d["id"] for d in r.json["documents"]] == ["1.1", "1.2"]

    assert client.get("/api/requirements").status_code == 400
    assert client.get("/api/requirements?dischargeType=Sea").status_code == 400
