# studio/llm/prompts/__init__.py
"""
Prompt builders for the AI proxy routes.
"""
from .component import (
    build_analyze_prompt,
    build_generate_prompt,
    build_refine_prompt,
    build_variations_prompt,
    split_code,
)

__all__ = [
    "build_analyze_prompt",
    "build_generate_prompt",
    "build_refine_prompt",
    "build_variations_prompt",
    "split_code",
]
