# studio/preview/__init__.py
"""
Live preview: JSX + CSS in, standalone HTML document out.
"""
from .builder import build_preview_html, detect_component_name, strip_module_syntax

__all__ = ["build_preview_html", "detect_component_name", "strip_module_syntax"]
