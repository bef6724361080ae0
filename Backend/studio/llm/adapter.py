# studio/llm/adapter.py
"""
LLM adapter - single entry point for the AI proxy routes.

One attempt per call: no retries and no fallback provider. Failures
surface as LLMError and the route answers 500.
"""
from typing import Any, Dict, Optional

from studio.core.config import settings
from studio.core.exceptions import LLMError
from studio.core.logging import log
from studio.lib import monitoring


LLMResponse = Dict[str, Any]  # {"text": str, "usage": {"input": int, "output": int, "total": int}}


class LLMAdapter:
    """
    Dispatches a prompt to a provider and records token usage.
    """

    def __init__(self, provider: str = "gemini", model: Optional[str] = None):
        self.provider = provider
        self.model = model or settings.llm.gemini_model

    async def call(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        operation: str = "generate",
    ) -> LLMResponse:
        from .providers import gemini

        provider_map = {
            "gemini": gemini.call,
        }

        if self.provider not in provider_map:
            raise LLMError(self.provider, f"Unknown provider: {self.provider}")

        try:
            result = await provider_map[self.provider](
                prompt=prompt,
                model=model or self.model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except LLMError:
            monitoring.record_llm_call(operation, "error")
            raise
        except Exception as e:
            monitoring.record_llm_call(operation, "error")
            raise LLMError(self.provider, f"Provider error: {e}")

        usage = result.get("usage", {})
        monitoring.record_llm_call(operation, "ok", usage)
        log("TOKENS", f"{operation}: in={usage.get('input', 0)} out={usage.get('output', 0)}")
        return result


# Singleton instance
_adapter = LLMAdapter()


async def call_llm(prompt: str, operation: str = "generate", **kwargs) -> str:
    """Call the configured LLM and return only the text."""
    result = await _adapter.call(prompt, operation=operation, **kwargs)
    return result.get("text", "")
