"""
AI proxy routes with the LLM mocked out.
"""
import json
from unittest.mock import AsyncMock, patch

import pytest

from studio.api.ai import generate_cache_key
from studio.core.config import settings
from studio.core.exceptions import LLMError, RateLimitError
from studio.llm.prompts import build_generate_prompt

pytestmark = pytest.mark.anyio

COMPONENT_JSON = json.dumps({
    "jsx": "function Card() { return <div className='card'/>; }",
    "css": ".card { padding: 1rem; }",
    "explanation": "A card",
})


def mock_llm(**kwargs):
    return patch("studio.api.ai.call_llm", new=AsyncMock(**kwargs))


async def test_requires_authentication(async_client):
    response = await async_client.post("/api/ai/generate", json={"prompt": "a card"})
    assert response.status_code == 401


async def test_generate_parses_json(async_client, authenticated):
    with mock_llm(return_value=f"Sure!\n```json\n{COMPONENT_JSON}\n```") as llm:
        response = await async_client.post("/api/ai/generate", json={"prompt": "a card"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["cached"] is False
    assert body["data"]["jsx"].startswith("function Card()")
    assert body["data"]["css"] == ".card { padding: 1rem; }"
    assert body["data"]["tsx"] == ""
    assert llm.await_args.kwargs["operation"] == "generate"


async def test_generate_fallback_on_plain_text(async_client, authenticated):
    with mock_llm(return_value="function A() { return null }"):
        response = await async_client.post("/api/ai/generate", json={"prompt": "a card"})

    assert response.json()["data"] == {
        "jsx": "function A() { return null }",
        "css": "",
        "tsx": "",
        "explanation": "Generated component based on your request",
    }


async def test_generate_requires_prompt(async_client, authenticated):
    response = await async_client.post("/api/ai/generate", json={"prompt": "   "})
    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required"}


async def test_generate_caches_result(async_client, authenticated, fake_redis):
    payload = {"prompt": "a card", "chatHistory": [{"role": "user", "content": "hi"}]}

    with mock_llm(return_value=COMPONENT_JSON) as llm:
        first = await async_client.post("/api/ai/generate", json=payload)
        second = await async_client.post("/api/ai/generate", json=payload)

    assert llm.await_count == 1
    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    assert second.json()["data"] == first.json()["data"]

    key = generate_cache_key(build_generate_prompt("a card", None, payload["chatHistory"]))
    assert fake_redis.ttls[key] == settings.cache.ai_generate_ttl


async def test_generate_cache_key_depends_on_existing_code(async_client, authenticated, fake_redis):
    with mock_llm(return_value=COMPONENT_JSON) as llm:
        await async_client.post("/api/ai/generate", json={"prompt": "a card"})
        response = await async_client.post(
            "/api/ai/generate",
            json={"prompt": "a card", "existingCode": {"jsx": "function Old() { return null }"}},
        )

    assert llm.await_count == 2
    assert response.json()["cached"] is False


async def test_generate_works_without_cache(async_client, authenticated):
    with mock_llm(return_value=COMPONENT_JSON) as llm:
        await async_client.post("/api/ai/generate", json={"prompt": "a card"})
        await async_client.post("/api/ai/generate", json={"prompt": "a card"})
    assert llm.await_count == 2


async def test_generate_upstream_failure(async_client, authenticated):
    with mock_llm(side_effect=LLMError("gemini", "API key not valid", status=400)):
        response = await async_client.post("/api/ai/generate", json={"prompt": "a card"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate component", "details": "API key not valid"}


async def test_generate_rate_limited_upstream(async_client, authenticated):
    with mock_llm(side_effect=RateLimitError("gemini")):
        response = await async_client.post("/api/ai/generate", json={"prompt": "a card"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate component"


async def test_refine(async_client, authenticated):
    current = {"jsx": "function A() { return <b/> }", "css": ".a{}", "tsx": "const A = 1"}
    with mock_llm(return_value="function A() { return <i/> }") as llm:
        response = await async_client.post(
            "/api/ai/refine", json={"prompt": "italic", "currentCode": current}
        )

    assert response.status_code == 200
    assert response.json()["data"] == {
        "jsx": "function A() { return <i/> }",
        "css": ".a{}",
        "tsx": "const A = 1",
        "explanation": "Refined component based on your request",
    }
    assert "italic" in llm.await_args.args[0]


async def test_refine_requires_prompt_and_code(async_client, authenticated):
    response = await async_client.post("/api/ai/refine", json={"prompt": "italic"})
    assert response.status_code == 400
    assert response.json() == {"error": "Prompt and current code are required"}


async def test_refine_failure(async_client, authenticated):
    with mock_llm(side_effect=LLMError("gemini", "boom")):
        response = await async_client.post(
            "/api/ai/refine", json={"prompt": "x", "currentCode": {"jsx": "<A/>"}}
        )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to refine component", "details": "boom"}


async def test_variations(async_client, authenticated):
    variations = {"variations": [{"name": "Dark", "jsx": "<A/>", "css": "", "description": "dark"}]}
    with mock_llm(return_value=json.dumps(variations)) as llm:
        response = await async_client.post(
            "/api/ai/variations", json={"baseCode": {"jsx": "<A/>"}, "count": 50}
        )

    assert response.status_code == 200
    assert response.json()["data"] == variations
    # Count is clamped
    assert "Generate 10 different variations" in llm.await_args.args[0]


async def test_variations_fallback(async_client, authenticated):
    with mock_llm(return_value="no json"):
        response = await async_client.post(
            "/api/ai/variations", json={"baseCode": {"jsx": "<A/>", "css": ".a{}"}}
        )

    assert response.json()["data"] == {
        "variations": [{
            "name": "Default Variation",
            "jsx": "no json",
            "css": ".a{}",
            "description": "Generated variation",
        }]
    }


async def test_variations_requires_code(async_client, authenticated):
    response = await async_client.post("/api/ai/variations", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Base code is required"}


async def test_analyze(async_client, authenticated):
    analysis = {"analysis": {"codeQuality": "good", "overallScore": 90}}
    with mock_llm(return_value=json.dumps(analysis)):
        response = await async_client.post("/api/ai/analyze", json={"code": "function A() {}"})

    assert response.status_code == 200
    assert response.json()["data"] == analysis


async def test_analyze_fallback(async_client, authenticated):
    with mock_llm(return_value="I could not analyze this"):
        response = await async_client.post("/api/ai/analyze", json={"code": {"jsx": "<A/>"}})

    analysis = response.json()["data"]["analysis"]
    assert analysis["codeQuality"] == "Analysis not available"
    assert analysis["overallScore"] == 0
    assert analysis["issues"] == []


async def test_analyze_broken_json_reports_failure(async_client, authenticated):
    with mock_llm(return_value='{"analysis": {"codeQuality": "good",}'):
        response = await async_client.post("/api/ai/analyze", json={"code": "function A() {}"})

    analysis = response.json()["data"]["analysis"]
    assert analysis["codeQuality"] == "Failed to analyze code"
    assert analysis["security"] == "Failed to analyze code"
    assert analysis["overallScore"] == 0


async def test_analyze_requires_code(async_client, authenticated):
    response = await async_client.post("/api/ai/analyze", json={"code": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Code is required"}


async def test_invalid_body(async_client, authenticated):
    response = await async_client.post("/api/ai/variations", json={"baseCode": "<A/>", "count": "many"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request body"
    assert body["details"]
