"""
Naming helpers shared by descriptors, templates and file layout.

Everything here is a pure string function; file and route names are derived
from a resource name through these and nothing else.
"""

from __future__ import annotations

import re


def camel_case(s: str) -> str:
    """Convert to camelCase. Handles PascalCase input correctly."""
    s = re.sub(r"([a-z])([A-Z])", r"\1_\2", s)
    parts = s.replace("-", "_").split("_")
    return parts[0].lower() + "".join(p.capitalize() for p in parts[1:])


def pascal_case(s: str) -> str:
    """Convert to PascalCase."""
    parts = re.split(r"[-_\s]+", s)
    return "".join(p[0].upper() + p[1:] if p else "" for p in parts)


def plural(s: str) -> str:
    """Simple English pluralization."""
    if s.endswith("y") and not s.endswith(("ay", "ey", "iy", "oy", "uy")):
        return s[:-1] + "ies"
    if s.endswith(("s", "x", "ch", "sh")):
        return s + "es"
    return s + "s"


def title_case(s: str) -> str:
    """'dueDate' -> 'Due Date', used for default labels."""
    words = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", s).replace("_", " ").replace("-", " ")
    return " ".join(w[:1].upper() + w[1:] for w in words.split())


def quote(value: str, char: str = "'") -> str:
    """Quote a literal for emitted code unless it is already quoted."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"`":
        if value[0] == char:
            return value
        value = value[1:-1]
    escaped = value.replace("\\", "\\\\").replace(char, "\\" + char)
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return f"{char}{escaped}{char}"
