"""The ``navigate`` pseudo-tool: tells the dashboard to open a page.

No external call is made and the outcome is not stored as a tool turn.
"""

from __future__ import annotations

import logging

from .agent_prompts import KNOWN_UI_PATHS
from .tool_registry import ToolDefinition, ToolName, ToolResult

logger = logging.getLogger(__name__)


def navigate(args: dict) -> ToolResult:
    """Return a navigate action for ``args["path"]``, passed through as given."""
    path = args.get("path")
    if not isinstance(path, str) or not path.strip():
        return ToolResult.invalid("❌ Falha: Informe a página de destino.")

    # TODO: decide with the frontend whether unknown routes should be rejected here
    if path not in KNOWN_UI_PATHS:
        logger.warning("navigate: model requested unknown route %r", path)

    return ToolResult.ok(
        "Ok, navegando para {}...".format(path),
        action={"type": "navigate", "payload": {"path": path}},
    )


NAVIGATION_TOOLS = [
    ToolDefinition(
        name=ToolName.NAVIGATE,
        description="Open a dashboard page.",
        handler=navigate,
        records_history=False,
    ),
]
