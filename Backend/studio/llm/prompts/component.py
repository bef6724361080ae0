# studio/llm/prompts/component.py
"""
Prompts for the component generator: generate, refine, variations, analyze.

Every prompt asks for a JSON object; the routes extract it with
``studio.llm.parsing.extract_json``.
"""
from typing import Any, Iterable, Mapping, Tuple, Union

CodeInput = Union[str, Mapping[str, Any], None]

HISTORY_WINDOW = 5


GENERATE_REQUIREMENTS = """You are an expert React developer. Generate a complete React component based on the user's request.

IMPORTANT REQUIREMENTS:
1. Generate a standalone React functional component (no imports needed)
2. Use only React hooks (useState, useEffect) - no external libraries
3. Include all CSS styles in a separate CSS block
4. Make the component self-contained and preview-friendly
5. Use semantic HTML elements and modern design principles
6. Make the component responsive and accessible
7. Use inline styles or CSS classes for styling
8. Do NOT include import statements or export statements
9. The component should work in a browser environment with React 18
"""

COMPONENT_RESPONSE_FORMAT = """{
  "jsx": "// React JSX code here",
  "css": "// CSS styles here",
  "tsx": "// TypeScript version if applicable",
  "explanation": "Brief explanation of the component and its features"
}"""

REFINE_RESPONSE_FORMAT = """{
  "jsx": "// Updated React JSX code",
  "css": "// Updated CSS styles",
  "tsx": "// Updated TypeScript version if applicable",
  "explanation": "Brief explanation of the changes made"
}"""

VARIATIONS_RESPONSE_FORMAT = """{
  "variations": [
    {
      "name": "Variation 1 Name",
      "jsx": "// JSX code for variation 1",
      "css": "// CSS for variation 1",
      "description": "Brief description of this variation"
    }
  ]
}"""

ANALYSIS_RESPONSE_FORMAT = """{
  "analysis": {
    "codeQuality": "Assessment of code quality",
    "performance": "Performance considerations",
    "accessibility": "Accessibility improvements",
    "security": "Security considerations",
    "optimizations": ["List of suggested optimizations"],
    "issues": ["List of potential issues"],
    "overallScore": 85
  }
}"""


def split_code(code: CodeInput) -> Tuple[str, str]:
    """(jsx, css) from either a raw JSX string or a componentCode object."""
    if code is None:
        return "", ""
    if isinstance(code, str):
        return code, ""
    return str(code.get("jsx") or ""), str(code.get("css") or "")


def has_code(code: CodeInput) -> bool:
    return bool(split_code(code)[0].strip())


def _message_field(message: Any, name: str) -> str:
    if isinstance(message, Mapping):
        return str(message.get(name, ""))
    return str(getattr(message, name, ""))


def build_generate_prompt(
    user_prompt: str,
    existing_code: CodeInput = None,
    chat_history: Iterable[Any] = (),
) -> str:
    prompt = f"{GENERATE_REQUIREMENTS}\nUser Request: {user_prompt}\n\n"

    if has_code(existing_code):
        jsx, css = split_code(existing_code)
        prompt += f"\nExisting Code:\n{jsx}\n"
        if css:
            prompt += f"\nExisting CSS:\n{css}\n"
        prompt += "\nPlease modify/improve the existing code based on the new request."

    history = list(chat_history)[-HISTORY_WINDOW:]
    if history:
        prompt += "\n\nPrevious conversation context:\n"
        for message in history:
            prompt += f"{_message_field(message, 'role')}: {_message_field(message, 'content')}\n"

    prompt += f"\n\nPlease provide the response in the following JSON format:\n{COMPONENT_RESPONSE_FORMAT}"
    return prompt


def build_refine_prompt(user_prompt: str, current_code: CodeInput) -> str:
    jsx, css = split_code(current_code)
    return f"""You are an expert React developer. Please refine/modify the existing React component based on the user's request.

Current Component Code:
{jsx}

CSS:
{css}

User's Refinement Request: {user_prompt}

Please provide the updated component in the same JSON format:
{REFINE_RESPONSE_FORMAT}

Make sure to preserve the existing functionality while applying the requested changes."""


def build_variations_prompt(base_code: CodeInput, count: int = 3) -> str:
    jsx, css = split_code(base_code)
    return f"""You are an expert React developer. Generate {count} different variations of the following React component. Each variation should have a different style, layout, or approach while maintaining the same core functionality.

Base Component:
{jsx}

CSS:
{css}

Please provide {count} variations in the following JSON format:
{VARIATIONS_RESPONSE_FORMAT}"""


def build_analyze_prompt(code: CodeInput) -> str:
    jsx, css = split_code(code)
    return f"""You are an expert React developer and code reviewer. Analyze the following React component code and provide feedback on:

1. Code quality and best practices
2. Performance considerations
3. Accessibility improvements
4. Security considerations
5. Suggested optimizations
6. Potential bugs or issues

Component Code:
{jsx}

CSS:
{css}

Please provide a comprehensive analysis in JSON format:
{ANALYSIS_RESPONSE_FORMAT}"""
