import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import get_settings
from app.core.http import make_httpx_client

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """The generateContent call failed or returned something unusable."""


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


def response_text(data: Dict[str, Any]) -> str:
    """Joined text of the first candidate, model thoughts excluded."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = (candidates[0] or {}).get("content") or {}
    chunks = []
    for part in (content.get("parts") or []):
        part = part or {}
        if part.get("thought"):
            continue
        if part.get("text"):
            chunks.append(part["text"])
    return "".join(chunks)


def decode_inline(inline: Dict[str, Any]) -> bytes:
    return base64.b64decode(inline["data"])


async def gemini_generate_content(
    model: str,
    parts: List[Dict[str, Any]],
    *,
    generation_config: Optional[Dict[str, Any]] = None,
    safety_settings: Optional[List[Dict[str, str]]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    settings = get_settings()
    url = f"{settings.gemini_base_url.rstrip('/')}/models/{model}:generateContent"

    payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
    if generation_config:
        payload["generationConfig"] = generation_config
    if safety_settings:
        payload["safetySettings"] = safety_settings

    images = sum(1 for p in parts if "inlineData" in p)
    logger.info("gemini request model=%s parts=%d images=%d", model, len(parts), images)

    timeout = httpx.Timeout(connect=30.0, read=settings.http_read_timeout, write=60.0, pool=60.0)
    headers = {"Content-Type": "application/json", "x-goog-api-key": settings.gemini_api_key}
    try:
        async with make_httpx_client(timeout, settings.proxy_url, transport) as client:
            r = await client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        raise GeminiError(f"gemini request failed: {e}") from e

    if r.status_code < 200 or r.status_code >= 300:
        raise GeminiError(f"gemini {r.status_code}: {(r.text or '')[:1500]}")

    try:
        data = r.json()
    except ValueError as e:
        raise GeminiError(f"gemini returned invalid JSON: {(r.text or '')[:500]}") from e
    if not isinstance(data, dict):
        raise GeminiError(f"unexpected gemini response: {str(data)[:500]}")
    return data
