# studio/lib/export.py
"""
Package a session's component as a downloadable zip.
"""
import io
import re
import zipfile
from typing import Tuple

from studio.models import ComponentCode

README_TEMPLATE = """# {title}

This component was generated using AI.

## Files:
- Component.jsx: React component
- styles.css: Component styles
- Component.tsx: TypeScript version (if available)

## Usage:
Import the component and styles into your React project.
"""


def export_filename(title: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", (title or "").strip()).strip("-")
    return f"component-{slug or 'generated'}.zip"


def build_component_zip(code: ComponentCode, title: str = "") -> Tuple[str, bytes]:
    """
    Returns (filename, zip bytes). Code files are only included when non-empty;
    the README is always present.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        if code.jsx:
            archive.writestr("Component.jsx", code.jsx)
        if code.css:
            archive.writestr("styles.css", code.css)
        if code.tsx:
            archive.writestr("Component.tsx", code.tsx)
        archive.writestr("README.md", README_TEMPLATE.format(title=title or "Generated Component"))
    return export_filename(title), buffer.getvalue()
