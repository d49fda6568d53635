from __future__ import annotations

from dataclasses import dataclass

from app.audittrack.constants import DocStatus


@dataclass(frozen=True)
class DocumentDefinition:
    key: str
    name: str
    description: str


@dataclass(frozen=True)
class DocumentItem:
    id: str
    name: str
    description: str
    status: DocStatus = DocStatus.PENDING
    notes: str = ""
    finding: str = ""
    corrective_action: str = ""


# Master definition of every document a facility can be asked for.
# Instance ids ("1.1") may map to a variant key ("1.1_DIRECT").
MASTER_DOCS: dict[str, DocumentDefinition] = {
    d.key: d
    for d in (
        DocumentDefinition(
            "1.1",
            "1.1 Atıksu Bağlantı İzin Belgesi",
            "İlgili kurumdan alınmış geçerli bağlantı izni.",
        ),
        DocumentDefinition(
            "1.1_DIRECT",
            "1.1 Atıksu Deşarj İzin Belgesi",
            "Direct discharge ise AAT Kimlik Belgesi zorunludur.",
        ),
        DocumentDefinition(
            "1.1_GSM",
            "1.1 GSMR Görüşü",
            "Atıksuyun evsel nitelikli olduğuna dair resmi görüş.",
        ),
        DocumentDefinition(
            "1.2",
            "1.2 Atıksu Deşarj Kayıtları",
            "Düzenli deşarj kayıtları (Opsiyonel).",
        ),
        DocumentDefinition(
            "1.2_MANDATORY",
            "1.2 Atıksu Deşarj Kayıtları",
            "Düzenli deşarj kayıtları (Zorunlu - <15m3 olduğu için).",
        ),
        DocumentDefinition(
            "1.3",
            '1.3 ZDHC Gateway "Waterdata"',
            "Gateway Waterdata ekran görüntüsü (Genel).",
        ),
        DocumentDefinition(
            "1.4",
            '1.4 ZDHC Gateway "Waterdata"',
            "Gateway Waterdata ekran görüntüsü (Detay).",
        ),
        DocumentDefinition(
            "1.6",
            "1.6 Periyodik Atık Su Analiz Raporları",
            "Son 12 aya ait, yasal limitlere göre yapılmış raporlar.",
        ),
        DocumentDefinition(
            "1.8",
            "1.8 Periyodik Atık Su Analiz Raporları",
            "Son 12 aya ait, yasal limitlere göre yapılmış raporlar.",
        ),
        DocumentDefinition(
            "2.3",
            "2.3 Çamur Bertaraf Yolu Beyannamesi",
            "Oluşan arıtma çamurunun nasıl bertaraf edildiğine dair beyan.",
        ),
        DocumentDefinition(
            "2.4",
            "2.4 Bertaraf Firması Sözleşmesi",
            "Bertaraf firması ile tesis arasındaki anlaşma, MoTAT kayıtları vb.",
        ),
        DocumentDefinition(
            "EXTRA_PARAMS",
            "Ek Parametre Muafiyet Beyanı",
            "Yasal olarak zorunlu olmasına rağmen test edilmeyen parametreler (ZSF, Fenol vb.) için beyan.",
        ),
    )
}

# Appended to analysis-report descriptions.
LEGAL_PARAM_NOTE = (
    "\n(Yasal olarak zorunlu olmasına rağmen test ettirmediğiniz parametreler varsa beyan mektubu eklenmelidir)."
)


def get_definition(key: str) -> DocumentDefinition:
    try:
        return MASTER_DOCS[key]
    except KeyError:
        raise KeyError(f"Unknown document definition: {key!r}") from None


def create_doc(doc_id: str, definition_key: str, *, augmented: bool = False) -> DocumentItem:
    """Fresh PENDING item for `doc_id` built from a catalog definition."""
    d = get_definition(definition_key)
    description = d.description + LEGAL_PARAM_NOTE if augmented else d.description
    return DocumentItem(id=doc_id, name=d.name, description=description)
