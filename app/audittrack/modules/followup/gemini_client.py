from __future__ import annotations

import json
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any


class TextGenerationError(RuntimeError):
    pass


class TextGenerationRateLimited(TextGenerationError):
    pass


@dataclass(frozen=True)
class GeminiClient:
    api_key: str
    model: str = "gemini-3-flash-preview"
    base_url: str = "https://generativelanguage.googleapis.com"
    timeout_seconds: int = 30

    def _url(self) -> str:
        model = urllib.parse.quote(self.model, safe="")
        return f"{self.base_url.rstrip('/')}/v1beta/models/{model}:generateContent"

    def request_json(self, body: dict[str, Any], *, retries: int = 2) -> dict[str, Any]:
        data = json.dumps(body).encode("utf-8")
        last_err: Exception | None = None
        for attempt in range(retries + 1):
            try:
                req = urllib.request.Request(self._url(), data=data, method="POST")
                req.add_header("x-goog-api-key", self.api_key)
                req.add_header("Content-Type", "application/json")
                req.add_header("Accept", "application/json")
                with urllib.request.urlopen(req, timeout=self.timeout_seconds) as resp:
                    raw = resp.read()
                    try:
                        return json.loads(raw.decode("utf-8"))
                    except ValueError as e:
                        raise TextGenerationError("Invalid JSON from Gemini") from e
            except urllib.error.HTTPError as e:
                if e.code == 429:
                    # rate limit; brief backoff
                    time.sleep(min(2 * (attempt + 1), 10))
                    last_err = TextGenerationRateLimited("Rate limited (429)")
                    continue
                try:
                    body_text = e.read().decode("utf-8", errors="ignore")
                except OSError:
                    body_text = ""
                raise TextGenerationError(f"HTTP {e.code} from Gemini: {body_text[:300]}") from e
            except (urllib.error.URLError, TimeoutError, ConnectionError) as e:
                last_err = e
                time.sleep(min(1 * (attempt + 1), 5))
                continue
        raise TextGenerationError(f"Gemini request failed after retries: {last_err}")

    def generate(self, prompt: str) -> str:
        """Single-turn text generation. Returns "" when the model sends no text."""
        j = self.request_json({"contents": [{"role": "user", "parts": [{"text": prompt}]}]})
        return extract_text(j)


def extract_text(response: dict[str, Any]) -> str:
    candidates = response.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return ""
    content = (candidates[0] or {}).get("content") or {}
    parts = content.get("parts") or []
    return "".join(p.get("text") or "" for p in parts if isinstance(p, dict)).strip()
