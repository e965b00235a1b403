"""Tool registry and dispatcher for the campaign agent.

The set of actions is closed: ``ToolName`` enumerates every tool the agent
may invoke, and a definition can only be registered under one of those
names. Handlers are registered by their feature modules at app startup.

Every handler returns a ``ToolResult``; its text is what the user reads and
what gets stored as the ``tool`` turn in history.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ToolName(str, enum.Enum):
    NAVIGATE = "navigate"
    CREATE_CAMPAIGN = "create_campaign"
    MODIFY_CAMPAIGN = "modify_campaign"
    LIST_CAMPAIGNS = "list_campaigns"
    GET_CAMPAIGN_DETAILS = "get_campaign_details"

    @classmethod
    def parse(cls, name) -> Optional["ToolName"]:
        """Map a raw tool name to a ToolName, or None if unrecognized."""
        try:
            return cls(name)
        except ValueError:
            return None


class ResultKind(str, enum.Enum):
    OK = "ok"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"
    UNKNOWN_TOOL = "unknown_tool"


@dataclass
class ToolResult:
    """Outcome of one tool invocation.

    Attributes:
        text: User-facing text, for success and failure alike.
        kind: What happened; only ``OK`` counts as success.
        action: Optional UI instruction for the caller (navigate only).
    """

    text: str
    kind: ResultKind = ResultKind.OK
    action: Optional[dict] = None

    @property
    def is_error(self) -> bool:
        return self.kind is not ResultKind.OK

    @classmethod
    def ok(cls, text, action=None):
        return cls(text=text, kind=ResultKind.OK, action=action)

    @classmethod
    def invalid(cls, text):
        return cls(text=text, kind=ResultKind.VALIDATION_ERROR)

    @classmethod
    def not_found(cls, text):
        return cls(text=text, kind=ResultKind.NOT_FOUND)

    @classmethod
    def failed(cls, text):
        return cls(text=text, kind=ResultKind.TRANSPORT_ERROR)


@dataclass
class ToolDefinition:
    """A tool available to the agent.

    Attributes:
        name: One of the ToolName members.
        description: Short description, used in logs and docs.
        handler: Function that executes the tool.
            Signature: (args: dict) -> ToolResult
        records_history: If False, the outcome is not stored as a ``tool``
            turn (navigation is narration only).
    """

    name: ToolName
    description: str
    handler: Callable[[dict], ToolResult]
    records_history: bool = True


TOOL_REGISTRY: dict[ToolName, ToolDefinition] = {}


def register_tool(tool: ToolDefinition) -> None:
    """Register a tool definition in the global registry.

    Raises:
        ValueError: If the name is not a ToolName or is already registered.
    """
    name = ToolName.parse(tool.name)
    if name is None:
        raise ValueError("Tool '{}' is not a known agent tool".format(tool.name))
    if name in TOOL_REGISTRY:
        raise ValueError("Tool '{}' is already registered".format(name.value))
    tool.name = name
    TOOL_REGISTRY[name] = tool


def unregister_tool(name) -> None:
    """Remove a tool from the registry. Mainly used in tests."""
    parsed = ToolName.parse(name)
    if parsed is not None:
        TOOL_REGISTRY.pop(parsed, None)


def get_tool(name) -> Optional[ToolDefinition]:
    """Look up a tool by name. Returns None if unknown or unregistered."""
    parsed = ToolName.parse(name)
    if parsed is None:
        return None
    return TOOL_REGISTRY.get(parsed)


def clear_registry() -> None:
    """Clear all registered tools. Used in tests."""
    TOOL_REGISTRY.clear()


def dispatch(name, arguments) -> ToolResult:
    """Run the handler registered for ``name``.

    Unknown names and handler crashes come back as error results; this
    function does not raise.
    """
    tool_def = get_tool(name)
    if tool_def is None:
        return ToolResult(
            text="Erro: Ferramenta '{}' desconhecida.".format(name),
            kind=ResultKind.UNKNOWN_TOOL,
        )

    try:
        return tool_def.handler(arguments or {})
    except Exception as exc:
        logger.exception("Tool '%s' failed: %s", tool_def.name.value, exc)
        return ToolResult.failed("❌ Não foi possível concluir a ação ({}).".format(tool_def.name.value))
