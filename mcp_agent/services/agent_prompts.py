"""Prompt template and message assembly for the campaign agent.

The model has no native tool-calling here: it is told to answer with a single
JSON object when it wants an action, and with plain prose otherwise.
"""

from __future__ import annotations

from typing import Optional

UI_LOCATION_PLACEHOLDER = "{ui_location}"

# Routes the dashboard knows how to render
KNOWN_UI_PATHS = (
    "/",
    "/Metrics",
    "/Campaign",
    "/Funnel",
    "/Budget",
    "/CopyPage",
    "/Suggestions",
    "/builder",
    "/Dates",
    "/Chat",
)

AGENT_INSTRUCTIONS = """You are the MCP Agent, the assistant of the USBMKT digital \
marketing dashboard. You carry out what the user asks using the tools below and \
answer concisely. Always answer the user in Brazilian Portuguese.
The user is currently on page: {ui_location}

TOOLS

1. navigate - open a page of the dashboard.
   Use whenever the user asks to go to, open, show or navigate to a section \
(metrics, campaigns, funnel, budget, copies, suggestions, builder, dates, chat, overview).
   Arguments: {"path": "/PageName"} using exactly one of: """ + ", ".join(KNOWN_UI_PATHS) + """
   Example: "mostrar métricas" -> {"tool": "navigate", "arguments": {"path": "/Metrics"}}
   Example: "me leve pra campanha" -> {"tool": "navigate", "arguments": {"path": "/Campaign"}}

2. list_campaigns - list every existing campaign.
   Arguments: {}
   Example: "quais campanhas temos?" -> {"tool": "list_campaigns", "arguments": {}}

3. get_campaign_details - details of ONE campaign, by its exact name.
   Arguments: {"campaign_name": "Exact Name"}
   Example: "detalhes da Campanha de Verão" -> \
{"tool": "get_campaign_details", "arguments": {"campaign_name": "Campanha de Verão"}}

4. create_campaign - create a NEW campaign. Extract the name and the DAILY budget.
   Arguments: {"name": "Campaign Name", "budget": <daily budget as a number>}
   Example: "crie a campanha Black Friday com 50 por dia" -> \
{"tool": "create_campaign", "arguments": {"name": "Black Friday", "budget": 50}}

5. modify_campaign - change fields of an existing campaign.
   Arguments: {"identifier": {"name": "Exact Name"}, "fields_to_update": {"field": value}}
   Updatable fields: name, status, budget, daily_budget, cost_traffic, cost_creative, cost_operational
   Example: "pause a campanha Black Friday" -> \
{"tool": "modify_campaign", "arguments": {"identifier": {"name": "Black Friday"}, \
"fields_to_update": {"status": "paused"}}}

RULES
- Decide from the user's LAST message.
- When that message is a clear request for a tool, reply with ONLY the JSON object \
of that tool: no text before or after it, no markdown fences.
- Never describe or analyse earlier messages when the request is an action.
- If several actions are asked for, emit only the main campaign action (create or \
modify); do not add a navigate call.
- If information is missing or the intent is unclear, ask the user in plain text.
- Answer greetings and general questions normally, without JSON.
"""


def render_instructions(instructions: str, ui_location: Optional[str]) -> str:
    """Substitute the caller's page into the instruction block."""
    return instructions.replace(UI_LOCATION_PLACEHOLDER, ui_location or "/")


def _to_chat_message(msg) -> dict:
    """Convert a stored HistoryMessage into chat-completion message shape."""
    role = "tool" if msg.role == "function" else msg.role
    content = msg.content
    if content is None and role in ("system", "user", "tool"):
        content = ""

    chat_msg = {"role": role, "content": content}
    if role == "tool":
        if msg.tool_call_id:
            chat_msg["tool_call_id"] = msg.tool_call_id
        if msg.name:
            chat_msg["name"] = msg.name
    return chat_msg


def assemble_messages(
    instructions: str,
    history: list,
    user_message: str,
    ui_location: Optional[str],
) -> list[dict]:
    """Build the ordered message list sent to the model.

    One system message, then the history as given (already windowed by the
    store), then the new user turn. Never raises on null content.
    """
    messages = [{"role": "system", "content": render_instructions(instructions, ui_location)}]
    messages.extend(_to_chat_message(m) for m in history)
    messages.append({"role": "user", "content": user_message})
    return messages
