# studio/lib/monitoring.py
from typing import Dict, Optional

from fastapi import FastAPI
from prometheus_client.registry import CollectorRegistry as Registry
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

from studio.core.logging import log

# Separate registry so tests can import the app more than once
registry = Registry()

llm_calls = Counter(
    "studio_llm_calls_total",
    "Calls made to the LLM provider",
    ["operation", "outcome"],
    registry=registry,
)

llm_tokens = Counter(
    "studio_llm_tokens_total",
    "Tokens reported by the LLM provider",
    ["direction"],
    registry=registry,
)

ai_cache_lookups = Counter(
    "studio_ai_cache_lookups_total",
    "AI generation cache lookups",
    ["result"],
    registry=registry,
)


def record_llm_call(operation: str, outcome: str, usage: Optional[Dict[str, int]] = None):
    llm_calls.labels(operation=operation, outcome=outcome).inc()
    if usage:
        llm_tokens.labels(direction="input").inc(usage.get("input", 0) or 0)
        llm_tokens.labels(direction="output").inc(usage.get("output", 0) or 0)


def record_ai_cache(hit: bool):
    ai_cache_lookups.labels(result="hit" if hit else "miss").inc()


def register_monitoring(app: FastAPI):
    """
    Registers Prometheus monitoring on the FastAPI app and exposes /metrics.
    """
    instrumentator = Instrumentator(
        excluded_handlers=["/metrics"],
        registry=registry,
    ).instrument(app)

    instrumentator.expose(app, include_in_schema=False, should_gzip=True)

    log("MONITORING", "Prometheus instrumentation registered at /metrics.")
