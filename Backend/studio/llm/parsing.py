# studio/llm/parsing.py
"""
Pull the JSON object out of free-form model output.
"""
import json
import re
from typing import Any, Dict, Optional

from studio.core.exceptions import ParseError
from studio.core.logging import log

# Greedy: first "{" to last "}" so nested objects and prose around them both work
JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


def parse_json(text: str) -> Optional[Dict[str, Any]]:
    """
    Return the JSON object embedded in ``text``, or None when there is no
    brace-delimited block at all.

    Raises:
        ParseError: a block was found but is not a JSON object
    """
    if not text:
        return None

    match = JSON_BLOCK_RE.search(text)
    if not match:
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse AI response: {e}", {"position": e.pos})

    if not isinstance(parsed, dict):
        raise ParseError("AI response JSON is not an object")
    return parsed


def extract_json(text: str) -> Optional[Dict[str, Any]]:
    """Like ``parse_json`` but a bad block also reads as None."""
    try:
        return parse_json(text)
    except ParseError as e:
        log("AI", e.message)
        return None
