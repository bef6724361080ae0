# studio/preview/builder.py
"""
Preview document builder.

Wraps user JSX in a standalone HTML page that loads React 18, ReactDOM and
Babel standalone from unpkg and renders the component inside an error
boundary. The frontend drops the result into a sandboxed iframe (srcdoc).
"""
import re
from typing import Optional

REACT_URL = "https://unpkg.com/react@18/umd/react.development.js"
REACT_DOM_URL = "https://unpkg.com/react-dom@18/umd/react-dom.development.js"
BABEL_URL = "https://unpkg.com/@babel/standalone/babel.min.js"

DEFAULT_COMPONENT_NAME = "App"

IMPORT_RE = re.compile(r"import\s+.*?from\s+['\"][^'\"]*['\"];?\s*")
SIDE_EFFECT_IMPORT_RE = re.compile(r"^\s*import\s+['\"][^'\"]*['\"];?[ \t]*$", re.MULTILINE)
EXPORT_RE = re.compile(r"export\s+(default\s+)?")
COMPONENT_NAME_RE = re.compile(r"(?:function|const)\s+(\w+)")

ERROR_BOUNDARY = """
      class ErrorBoundary extends React.Component {
        constructor(props) {
          super(props);
          this.state = { hasError: false, error: null };
        }

        static getDerivedStateFromError(error) {
          return { hasError: true, error };
        }

        componentDidCatch(error, errorInfo) {
          console.error('Component Error:', error, errorInfo);
        }

        render() {
          if (this.state.hasError) {
            return (
              <div style={{ padding: '20px', color: 'red', border: '1px solid red', borderRadius: '4px' }}>
                <h3>Component Error</h3>
                <p>{this.state.error?.message || 'Something went wrong'}</p>
                <button onClick={() => this.setState({ hasError: false })}>Try Again</button>
              </div>
            );
          }
          return this.props.children;
        }
      }
"""

BASE_STYLES = """
      * { box-sizing: border-box; }
      body {
        margin: 0;
        padding: 20px;
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
        background: #f5f5f5;
      }
      #root {
        background: white;
        border-radius: 8px;
        box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        overflow: hidden;
      }
"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Component Preview</title>
    <style>{base_styles}
      {css}
    </style>
  </head>
  <body>
    <div id="root"></div>
    <script crossorigin src="{react_url}"></script>
    <script crossorigin src="{react_dom_url}"></script>
    <script src="{babel_url}"></script>
    <script type="text/babel" data-type="module">
      const {{ useState, useEffect }} = React;
{error_boundary}
{jsx}

      const root = ReactDOM.createRoot(document.getElementById('root'));
      root.render(
        React.createElement(ErrorBoundary, null,
          React.createElement({component_name})
        )
      );
    </script>
  </body>
</html>
"""

EMPTY_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Component Preview</title>
  </head>
  <body style="font-family: sans-serif; color: #6b7280; display: flex; align-items: center; justify-content: center; height: 100vh; margin: 0;">
    <div style="text-align: center;">
      <p>No component to preview</p>
      <p style="font-size: 0.875rem;">Generate a component using the chat</p>
    </div>
  </body>
</html>
"""


def strip_module_syntax(jsx: str) -> str:
    """Drop import statements and export keywords; the page has no module loader."""
    jsx = IMPORT_RE.sub("", jsx)
    jsx = SIDE_EFFECT_IMPORT_RE.sub("", jsx)
    return EXPORT_RE.sub("", jsx)


def detect_component_name(jsx: str) -> str:
    match = COMPONENT_NAME_RE.search(jsx)
    return match.group(1) if match else DEFAULT_COMPONENT_NAME


def placeholder_component(name: str) -> str:
    return f"""function {name}() {{
  return (
    <div style={{{{ padding: '20px', fontFamily: 'Arial, sans-serif' }}}}>
      <h1>Generated Component</h1>
      <p>This is a placeholder component. Please check the generated code.</p>
    </div>
  );
}}"""


def _escape_closing_tag(text: str, tag: str) -> str:
    # A literal "</script>" or "</style>" would end the enclosing element early
    return re.sub(rf"</({tag})", r"<\\/\1", text, flags=re.IGNORECASE)


def prepare_jsx(jsx: str) -> tuple:
    """Returns (cleaned jsx, component name)."""
    code = strip_module_syntax(jsx.strip())
    name = detect_component_name(code)
    if "return" not in code:
        code = placeholder_component(name)
    return code, name


def build_preview_html(jsx: Optional[str], css: Optional[str] = "") -> str:
    if not jsx or not jsx.strip():
        return EMPTY_PAGE

    code, name = prepare_jsx(jsx)
    return PAGE_TEMPLATE.format(
        base_styles=BASE_STYLES,
        css=_escape_closing_tag(css or "", "style"),
        react_url=REACT_URL,
        react_dom_url=REACT_DOM_URL,
        babel_url=BABEL_URL,
        error_boundary=ERROR_BOUNDARY,
        jsx=_escape_closing_tag(code, "script"),
        component_name=name,
    )
