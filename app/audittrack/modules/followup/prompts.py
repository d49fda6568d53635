from __future__ import annotations

from collections.abc import Iterable

from app.audittrack.constants import DocStatus
from app.audittrack.modules.companies.domain import Company
from app.audittrack.modules.requirements.catalog import DocumentItem

LOW_VOLUME_SUFFIX = "(<15 m3/gün - Düşük Kapasite)"
EMAIL_SUBJECT = "Inditex Atıksu Analizi - Eksik Belge Bildirimi"


def document_line(doc: DocumentItem) -> str:
    status_note = ""
    if doc.status == DocStatus.ISSUE:
        status_note = f"(Hata Notu: {doc.notes})" if doc.notes else "(Belge hatalı veya eksik gönderilmiş)"
    if doc.finding:
        status_note += f" - Tespit: {doc.finding}"
    return f"- {doc.name}: {doc.description} {status_note}".rstrip()


def build_followup_prompt(company: Company, missing: Iterable[DocumentItem]) -> str:
    doc_list = "\n".join(document_line(d) for d in missing)
    volume = f" {LOW_VOLUME_SUFFIX}" if company.is_low_volume else ""
    return f"""
Sen profesyonel bir denetim asistanısın. Aşağıdaki bilgilere göre bir firmaya atıksu denetimi için eksik belgeleri isteyen kibar, resmi ve Türkçe bir e-posta taslağı hazırla.

Firma Adı: {company.name}
Tesis Deşarj Tipi: {company.discharge_type.value}{volume}
Konu: {EMAIL_SUBJECT}

Durum: Firma belirtilen deşarj tipine göre denetlenmektedir. Aşağıdaki belgeler henüz teslim edilmedi veya gönderilenlerde sorun var. Lütfen bunları net bir şekilde listele ve en kısa sürede iletmelerini rica et.

Eksik/Hatalı Belgeler Listesi:
{doc_list}

E-posta sadece metin gövdesini içermeli, konu satırını en başa yaz.
""".strip()
