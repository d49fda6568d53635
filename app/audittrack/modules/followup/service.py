from __future__ import annotations

import logging
from typing import Protocol

from app.audittrack.modules.companies.domain import Company, missing_documents
from app.audittrack.modules.followup.gemini_client import GeminiClient, TextGenerationError
from app.audittrack.modules.followup.prompts import build_followup_prompt

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Hata: API Anahtarı bulunamadı."
NOTHING_MISSING_MESSAGE = "Tüm belgeler tamamlanmış görünüyor. Hatırlatma mailine gerek yok."
EMPTY_RESPONSE_MESSAGE = "Taslak oluşturulamadı."
FAILURE_MESSAGE = "Hata: Taslak oluşturulurken bir sorun oluştu. Lütfen daha sonra tekrar deneyin."


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


def client_from_config(config: dict) -> GeminiClient | None:
    api_key = (config.get("GEMINI_API_KEY") or "").strip()
    if not api_key:
        return None
    return GeminiClient(
        api_key=api_key,
        model=(config.get("GEMINI_MODEL") or "gemini-3-flash-preview").strip(),
        base_url=(config.get("GEMINI_BASE_URL") or "https://generativelanguage.googleapis.com").strip(),
        timeout_seconds=int(config.get("GEMINI_TIMEOUT_SECONDS") or 30),
    )


def generate_followup_email(company: Company, client: TextGenerator | None) -> str:
    """
    Draft a reminder email listing the company's missing or deficient documents.
    Never raises: every failure maps to a fixed, displayable message.
    """
    if client is None:
        return MISSING_KEY_MESSAGE

    missing = missing_documents(company.documents)
    if not missing:
        return NOTHING_MISSING_MESSAGE

    prompt = build_followup_prompt(company, missing)
    try:
        text = client.generate(prompt)
    except TextGenerationError as e:
        logger.error("Follow-up email generation failed for company id=%s: %s", company.id, e)
        return FAILURE_MESSAGE
    except Exception:
        logger.exception("Unexpected error generating follow-up email for company id=%s", company.id)
        return FAILURE_MESSAGE

    text = (text or "").strip()
    return text or EMPTY_RESPONSE_MESSAGE
