# studio/api/ai.py
"""
AI proxy routes.

Each route builds a prompt, makes one Gemini call, pulls the JSON object out
of the reply and falls back to a fixed structure when there is none.
"""
import hashlib
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from studio import cache
from studio.core.config import settings
from studio.core.exceptions import ParseError
from studio.core.logging import log
from studio.core.security import get_current_user
from studio.lib import monitoring
from studio.llm import call_llm, extract_json, parse_json
from studio.llm.prompts import (
    build_analyze_prompt,
    build_generate_prompt,
    build_refine_prompt,
    build_variations_prompt,
    split_code,
)
from studio.llm.prompts.component import has_code
from studio.models import User


router = APIRouter(prefix="/api/ai", tags=["AI"])

GENERATE_CACHE_PREFIX = "ai_generate:"
MIN_VARIATIONS = 1
MAX_VARIATIONS = 10

CodeInput = Union[str, Dict[str, Any]]


class AIRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateRequest(AIRequest):
    prompt: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
    existing_code: Optional[CodeInput] = Field(None, alias="existingCode")
    chat_history: List[Dict[str, Any]] = Field(default_factory=list, alias="chatHistory")


class RefineRequest(AIRequest):
    prompt: Optional[str] = None
    current_code: Optional[CodeInput] = Field(None, alias="currentCode")
    session_id: Optional[str] = Field(None, alias="sessionId")


class VariationsRequest(AIRequest):
    base_code: Optional[CodeInput] = Field(None, alias="baseCode")
    count: int = 3


class AnalyzeRequest(AIRequest):
    code: Optional[CodeInput] = None


def generate_cache_key(ai_prompt: str) -> str:
    """Keyed on the full prompt, so existing code and history are part of the key."""
    return GENERATE_CACHE_PREFIX + hashlib.sha256(ai_prompt.encode("utf-8")).hexdigest()


def _code_field(code: Optional[CodeInput], name: str) -> str:
    if isinstance(code, dict):
        return str(code.get(name) or "")
    return ""


def _failure(message: str, error: Exception) -> HTTPException:
    log("AI", f"{message}: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": message, "details": str(error)},
    )


def component_result(text: str, css: str = "", tsx: str = "", explanation: str = "") -> Dict[str, Any]:
    fallback = {"jsx": text, "css": css, "tsx": tsx, "explanation": explanation}
    parsed = extract_json(text)
    if parsed is None:
        return fallback
    return {"jsx": "", "css": "", "tsx": "", "explanation": explanation, **parsed}


def variations_result(text: str, css: str = "") -> Dict[str, Any]:
    parsed = extract_json(text)
    if parsed is not None and isinstance(parsed.get("variations"), list):
        return parsed
    return {
        "variations": [{
            "name": "Default Variation",
            "jsx": text,
            "css": css,
            "description": "Generated variation",
        }]
    }


ANALYSIS_UNAVAILABLE = "Analysis not available"
ANALYSIS_FAILED = "Failed to analyze code"


def _empty_analysis(reason: str) -> Dict[str, Any]:
    return {
        "analysis": {
            "codeQuality": reason,
            "performance": reason,
            "accessibility": reason,
            "security": reason,
            "optimizations": [],
            "issues": [],
            "overallScore": 0,
        }
    }


def analysis_result(text: str) -> Dict[str, Any]:
    """No JSON in the reply reads as unavailable; JSON that does not decode as a failure."""
    try:
        parsed = parse_json(text)
    except ParseError as e:
        log("AI", e.message)
        return _empty_analysis(ANALYSIS_FAILED)

    if parsed is not None and isinstance(parsed.get("analysis"), dict):
        return parsed
    return _empty_analysis(ANALYSIS_UNAVAILABLE)


@router.post("/generate")
async def generate_component(data: GenerateRequest, user: User = Depends(get_current_user)):
    if not data.prompt or not data.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")

    ai_prompt = build_generate_prompt(data.prompt, data.existing_code, data.chat_history)
    cache_key = generate_cache_key(ai_prompt)

    cached = await cache.get_cache(cache_key)
    monitoring.record_ai_cache(cached is not None)
    if cached is not None:
        log("AI", "Serving cached generation", session_id=data.session_id)
        return {"success": True, "data": cached, "cached": True}

    try:
        text = await call_llm(ai_prompt, operation="generate")
    except Exception as e:
        raise _failure("Failed to generate component", e)

    result = component_result(text, explanation="Generated component based on your request")
    await cache.set_cache(cache_key, result, settings.cache.ai_generate_ttl)

    log("AI", f"Generated component for {user.email}", session_id=data.session_id)
    return {"success": True, "data": result, "cached": False}


@router.post("/refine")
async def refine_component(data: RefineRequest, user: User = Depends(get_current_user)):
    if not data.prompt or not data.prompt.strip() or not has_code(data.current_code):
        raise HTTPException(status_code=400, detail="Prompt and current code are required")

    try:
        text = await call_llm(build_refine_prompt(data.prompt, data.current_code), operation="refine")
    except Exception as e:
        raise _failure("Failed to refine component", e)

    _, css = split_code(data.current_code)
    result = component_result(
        text,
        css=css,
        tsx=_code_field(data.current_code, "tsx"),
        explanation="Refined component based on your request",
    )
    log("AI", f"Refined component for {user.email}", session_id=data.session_id)
    return {"success": True, "data": result}


@router.post("/variations")
async def generate_variations(data: VariationsRequest, user: User = Depends(get_current_user)):
    if not has_code(data.base_code):
        raise HTTPException(status_code=400, detail="Base code is required")

    count = max(MIN_VARIATIONS, min(MAX_VARIATIONS, data.count))
    try:
        text = await call_llm(build_variations_prompt(data.base_code, count), operation="variations")
    except Exception as e:
        raise _failure("Failed to generate variations", e)

    _, css = split_code(data.base_code)
    return {"success": True, "data": variations_result(text, css)}


@router.post("/analyze")
async def analyze_component(data: AnalyzeRequest, user: User = Depends(get_current_user)):
    if not has_code(data.code):
        raise HTTPException(status_code=400, detail="Code is required")

    try:
        text = await call_llm(build_analyze_prompt(data.code), operation="analyze")
    except Exception as e:
        raise _failure("Failed to analyze component", e)

    return {"success": True, "data": analysis_result(text)}
