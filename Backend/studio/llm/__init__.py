# studio/llm/__init__.py
"""
LLM module - Gemini access, prompt builders and response parsing.
"""
from .adapter import LLMAdapter, LLMResponse, call_llm
from .parsing import extract_json, parse_json

__all__ = ["LLMAdapter", "LLMResponse", "call_llm", "extract_json", "parse_json"]
