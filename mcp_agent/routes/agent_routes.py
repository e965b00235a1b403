"""Chat agent API routes."""

import logging

from flask import Blueprint, current_app, jsonify, request

from ..services import history_store
from ..services.agent_executor import run_agent_turn
from ..services.session import SESSION_HEADER, resolve_session_id

logger = logging.getLogger(__name__)

agent_bp = Blueprint("agent", __name__)


@agent_bp.route("/api/mcp-agent", methods=["POST"])
def agent_message():
    """Handle one chat message.

    Body: {"message": str, "context": {"path": str}}
    Returns 200 {"response": str, "action": {...} | null}, even when the
    agent failed internally.
    """
    body = request.get_json(silent=True) or {}
    message = body.get("message")
    context = body.get("context")
    path = context.get("path") if isinstance(context, dict) else None

    if not isinstance(message, str) or not message or not isinstance(path, str) or not path:
        return jsonify({"error": "message and context.path are required"}), 400

    session_id = resolve_session_id(request.headers)
    reply = run_agent_turn(session_id, message, ui_location=path)
    return jsonify(reply.to_dict())


@agent_bp.route("/api/mcp-history", methods=["GET"])
def agent_history():
    """Return the stored conversation of a session, oldest first.

    The session comes from the X-Session-ID header or the sessionId query param.
    """
    session_id = (request.headers.get(SESSION_HEADER) or request.args.get("sessionId") or "").strip()
    if not session_id:
        return jsonify({"error": "X-Session-ID header or sessionId query parameter is required"}), 400

    limit = current_app.config.get("MAX_HISTORY_FETCH_LIMIT", 50)
    return jsonify(history_store.load_conversation(session_id, limit))
