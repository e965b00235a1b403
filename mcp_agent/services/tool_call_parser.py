"""Detect a tool call in free-form model output.

The model is told to answer with nothing but a JSON object when it wants an
action. Anything else, including prose that merely contains a JSON snippet,
is a normal reply.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ToolInvocation:
    """A tool call extracted from one model reply."""

    tool: str
    arguments: dict = field(default_factory=dict)


def looks_like_single_object(text: Optional[str]) -> bool:
    """True if the trimmed text is delimited by braces with nothing around them."""
    if not text:
        return False
    trimmed = text.strip()
    return trimmed.startswith("{") and trimmed.endswith("}")


def try_parse_tool_call(raw_text: Optional[str]) -> Optional[ToolInvocation]:
    """Return the ToolInvocation encoded in ``raw_text``, or None for plain text."""
    if not looks_like_single_object(raw_text):
        return None

    try:
        decoded = json.loads(raw_text.strip())
    except (json.JSONDecodeError, ValueError):
        return None

    if not isinstance(decoded, dict):
        return None

    tool = decoded.get("tool")
    arguments = decoded.get("arguments")
    if not isinstance(tool, str) or not tool.strip() or not isinstance(arguments, dict):
        return None

    return ToolInvocation(tool=tool.strip(), arguments=arguments)
