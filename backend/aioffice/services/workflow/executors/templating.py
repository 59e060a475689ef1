"""Placeholder substitution for node text fields.

Node fields such as an email body or an HTTP request body may contain
``{{variable}}`` placeholders. Only string and number variables are
substituted, strings longer than ``MAX_VALUE_LENGTH`` are skipped, and
values are escaped for the context they are inserted into.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

MAX_VALUE_LENGTH = 10_000

_TEXT_ESCAPES = str.maketrans(
    {
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
    }
)

_JSON_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }
)


def is_substitutable(value: Any) -> bool:
    """Check whether a variable value may be inserted into text."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    return isinstance(value, str) and len(value) <= MAX_VALUE_LENGTH


def to_text(value: Any) -> str:
    """Render a substitutable value as text; integral floats drop ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_for_text(value: Any) -> str:
    """Escape a value for HTML or plain text output."""
    return to_text(value).translate(_TEXT_ESCAPES)


def escape_for_json(value: Any) -> str:
    """Escape a value for insertion inside a JSON string literal."""
    return to_text(value).translate(_JSON_ESCAPES)


def substitute(
    template: str,
    variables: Mapping[str, Any],
    escape: Callable[[Any], str] = escape_for_text,
) -> str:
    """Replace ``{{name}}`` placeholders with escaped variable values.

    Args:
        template: Text containing placeholders.
        variables: Run variables.
        escape: Escaping function applied to each value.

    Returns:
        The text with every substitutable placeholder replaced.
    """
    rendered = template
    for name, value in variables.items():
        if not is_substitutable(value):
            continue
        placeholder = f"{{{{{name}}}}}"
        if placeholder in rendered:
            rendered = rendered.replace(placeholder, escape(value))
    return rendered


def sanitize_identifier(value: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9]`` with ``_``."""
    return "".join(ch if ch.isascii() and ch.isalnum() else "_" for ch in value)


__all__ = [
    "MAX_VALUE_LENGTH",
    "escape_for_json",
    "escape_for_text",
    "is_substitutable",
    "sanitize_identifier",
    "substitute",
    "to_text",
]
