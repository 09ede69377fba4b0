from io import BytesIO
from typing import Any, Dict, List

import pytest
from PIL import Image

from app.api.routes.sessions import get_session_store
from app.core.config import get_settings


def png_bytes(width: int = 64, height: int = 64, color=(200, 80, 40)) -> bytes:
    out = BytesIO()
    Image.new("RGB", (width, height), color).save(out, format="PNG")
    return out.getvalue()


def jpeg_bytes(width: int = 64, height: int = 64) -> bytes:
    out = BytesIO()
    Image.new("RGB", (width, height), (10, 120, 200)).save(out, format="JPEG", quality=80)
    return out.getvalue()


def text_response(text: str, finish_reason: str = "STOP") -> Dict[str, Any]:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": finish_reason}]}


class FakeGemini:
    """Stands in for gemini_generate_content; records every request."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Any] = []

    def queue(self, response: Any) -> None:
        self.responses.append(response)

    async def __call__(self, model, parts, **kwargs):
        self.calls.append({"model": model, "parts": parts, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def studio_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("API_TXT_PATH", raising=False)
    monkeypatch.delenv("GEMINI_BASE_URL", raising=False)
    get_settings.cache_clear()
    get_session_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_session_store.cache_clear()


@pytest.fixture
def fake_gemini(monkeypatch) -> FakeGemini:
    fake = FakeGemini()
    monkeypatch.setattr("app.services.prompt_synth.gemini_generate_content", fake)
    monkeypatch.setattr("app.services.composite.gemini_generate_content", fake)
    return fake
