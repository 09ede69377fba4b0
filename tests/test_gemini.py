import asyncio
import json

import httpx
import pytest

from app.services.gemini import GeminiError, gemini_generate_content, response_text


def _run(coro):
    return asyncio.run(coro)


def test_request_shape_and_auth_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": []})

    parts = [{"text": "hi"}, {"inlineData": {"mimeType": "image/png", "data": "AAAA"}}]
    data = _run(
        gemini_generate_content(
            "gemini-2.5-flash-image",
            parts,
            generation_config={"imageConfig": {"aspectRatio": "1:1"}},
            safety_settings=[{"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"}],
            transport=httpx.MockTransport(handler),
        )
    )

    assert data == {"candidates": []}
    assert seen["url"].endswith("/models/gemini-2.5-flash-image:generateContent")
    assert "key=" not in seen["url"]
    assert seen["key"] == "test-key"
    assert seen["body"]["contents"] == [{"role": "user", "parts": parts}]
    assert seen["body"]["generationConfig"] == {"imageConfig": {"aspectRatio": "1:1"}}
    assert seen["body"]["safetySettings"][0]["threshold"] == "BLOCK_NONE"


def test_plain_request_has_no_generation_config():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    _run(gemini_generate_content("m", [{"text": "x"}], transport=httpx.MockTransport(handler)))
    assert "generationConfig" not in seen["body"]
    assert "safetySettings" not in seen["body"]


def test_error_status_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(429, text="quota exceeded"))
    with pytest.raises(GeminiError, match="429: quota exceeded"):
        _run(gemini_generate_content("m", [{"text": "x"}], transport=transport))


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeminiError, match="connection refused"):
        _run(gemini_generate_content("m", [{"text": "x"}], transport=httpx.MockTransport(handler)))


def test_invalid_json_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(GeminiError, match="invalid JSON"):
        _run(gemini_generate_content("m", [{"text": "x"}], transport=transport))


def test_response_text_joins_first_candidate_and_skips_thoughts():
    data = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "thinking...", "thought": True},
                        {"text": "Soft light, "},
                        {"text": "linen suit."},
                    ]
                }
            },
            {"content": {"parts": [{"text": "ignored"}]}},
        ]
    }
    assert response_text(data) == "Soft light, linen suit."
    assert response_text({}) == ""
    assert response_text({"candidates": [{"finishReason": "STOP"}]}) == ""


def test_client_with_proxy_builds():
    from app.core.http import make_httpx_client

    client = make_httpx_client(httpx.Timeout(5.0), "http://proxy.internal:8080")
    assert isinstance(client, httpx.AsyncClient)
    _run(client.aclose())

    client = make_httpx_client(httpx.Timeout(5.0))
    assert isinstance(client, httpx.AsyncClient)
    _run(client.aclose())
