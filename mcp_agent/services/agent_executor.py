"""One conversational turn of the campaign agent.

Flow per request:
    load history -> assemble prompt -> store user turn -> call model
    -> store assistant turn -> detect tool call -> dispatch -> store tool turn
    -> reply {text, action}

At most one tool runs per turn. Nothing in here raises: every failure ends
up as reply text, so the HTTP layer can always answer 200.

Usage:
    reply = run_agent_turn(session_id, "liste as campanhas", ui_location="/")
    reply.text, reply.action
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests
from flask import current_app

from . import history_store
from .agent_prompts import AGENT_INSTRUCTIONS, assemble_messages
from .history_store import HistoryMessage
from .llm_client import get_llm_client
from .tool_call_parser import try_parse_tool_call
from .tool_registry import dispatch, get_tool

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20

EMPTY_COMPLETION_TEXT = "Desculpe, não consegui gerar uma resposta."
FALLBACK_TEXT = "Desculpe, tive um problema ao processar sua mensagem."
ERROR_TEXT = "Erro no assistente de IA ({})."


@dataclass
class AgentReply:
    """What the agent answers: narration plus an optional UI action."""

    text: str
    action: Optional[dict] = None

    def to_dict(self):
        return {"response": self.text, "action": self.action}


def _error_label(exc):
    """Short label for an exception, e.g. an HTTP status or the class name."""
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return str(exc.response.status_code)
    return type(exc).__name__


def _new_tool_call_id():
    return "mcp_tool_call_{}".format(int(time.time() * 1000))


def run_agent_turn(session_id, message, ui_location, llm_client=None):
    """Process one user message for ``session_id`` and return an AgentReply."""
    limit = current_app.config.get("MAX_HISTORY_MESSAGES", DEFAULT_HISTORY_LIMIT)
    last_order = 0

    try:
        history = history_store.load_recent(session_id, limit)
        if history:
            last_order = history[-1].sequence or 0

        messages = assemble_messages(AGENT_INSTRUCTIONS, history, message, ui_location)
        logger.info(
            "[agent %s] Received %r, sending %d messages to the model",
            session_id, message, len(messages),
        )

        # Store the user turn first so it survives a model failure
        last_order += 1
        history_store.append(session_id, HistoryMessage(role="user", content=message), last_order)

        client = llm_client or get_llm_client()
        completion = client.complete(messages)
        raw_text = completion.content or ""
        logger.info(
            "[agent %s] Model reply (%d in / %d out tokens, $%.6f): %r",
            session_id, completion.input_tokens, completion.output_tokens,
            completion.cost_usd, raw_text,
        )

        if not raw_text and not completion.has_tool_calls:
            logger.warning("[agent %s] Model returned an empty reply", session_id)
            return AgentReply(text=EMPTY_COMPLETION_TEXT)

        last_order += 1
        history_store.append(
            session_id, HistoryMessage(role="assistant", content=raw_text), last_order,
        )

        invocation = try_parse_tool_call(raw_text)
        if invocation is None:
            return AgentReply(text=raw_text or FALLBACK_TEXT)

        logger.info("[agent %s] Tool call: %s %s", session_id, invocation.tool, invocation.arguments)
        result = dispatch(invocation.tool, invocation.arguments)
        logger.info("[agent %s] Tool result (%s): %s", session_id, result.kind.value, result.text)

        tool_def = get_tool(invocation.tool)
        if tool_def is None or tool_def.records_history:
            last_order += 1
            history_store.append(
                session_id,
                HistoryMessage(
                    role="tool",
                    content=result.text,
                    tool_call_id=_new_tool_call_id(),
                    name=invocation.tool,
                ),
                last_order,
            )

        return AgentReply(text=result.text or FALLBACK_TEXT, action=result.action)

    except Exception as exc:
        logger.exception("[agent %s] Agent turn failed: %s", session_id, exc)
        history_store.append(
            session_id,
            HistoryMessage(role="assistant", content="Erro interno: {}".format(exc)),
            last_order + 1,
        )
        return AgentReply(text=ERROR_TEXT.format(_error_label(exc)))
