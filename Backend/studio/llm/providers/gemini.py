# studio/llm/providers/gemini.py
"""
Google Gemini provider implementation.
"""
import json
from typing import Any, Dict, Optional

import aiohttp

from studio.core.config import settings
from studio.core.exceptions import LLMError, RateLimitError
from studio.core.logging import log

PROVIDER = "gemini"


def build_payload(prompt: str, temperature: float, max_tokens: int) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        },
    }


def _error_message(text: str, status: int) -> str:
    """Prefer the API's own ``error.message`` over the raw body."""
    try:
        data = json.loads(text)
        message = data.get("error", {}).get("message")
        if message:
            return message
    except (json.JSONDecodeError, AttributeError):
        pass
    return f"HTTP error! status: {status}"


def extract_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        raise LLMError(PROVIDER, "No content received from the API.")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        raise LLMError(PROVIDER, "No content received from the API.")

    return parts[0].get("text", "")


async def call(
    prompt: str,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Call Google Gemini ``generateContent``.

    Returns:
        {"text": str, "usage": {"input": int, "output": int, "total": int}}

    Raises:
        RateLimitError on 429, LLMError on any other failure
    """
    api_key = settings.llm.gemini_api_key
    if not api_key:
        raise LLMError(PROVIDER, "GEMINI_API_KEY not configured")

    model = model or settings.llm.gemini_model
    url = f"{settings.llm.gemini_api_url}/{model}:generateContent?key={api_key}"
    payload = build_payload(
        prompt,
        settings.llm.temperature if temperature is None else temperature,
        max_tokens or settings.llm.max_tokens,
    )
    timeout = aiohttp.ClientTimeout(total=settings.llm.request_timeout)

    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(url, json=payload, timeout=timeout) as response:
                text = await response.text()
                status = response.status
    except aiohttp.ClientError as e:
        raise LLMError(PROVIDER, f"Request failed: {e}")

    if status == 429:
        log("GEMINI", f"429 Rate limit response: {text[:500]}")
        raise RateLimitError(PROVIDER, _error_message(text, status))

    if status != 200:
        log("GEMINI", f"Error {status}: {text[:500]}")
        raise LLMError(PROVIDER, _error_message(text, status), status=status)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        log("GEMINI", f"Failed to parse JSON: {text[:500]}")
        raise LLMError(PROVIDER, f"Failed to parse Gemini response: {e}")

    usage_metadata = data.get("usageMetadata", {})
    return {
        "text": extract_text(data),
        "usage": {
            "input": usage_metadata.get("promptTokenCount", 0),
            "output": usage_metadata.get("candidatesTokenCount", 0),
            "total": usage_metadata.get("totalTokenCount", 0),
        },
    }
