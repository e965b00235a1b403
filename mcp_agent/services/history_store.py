"""Durable per-session conversation history.

Rows live in ``mcp_conversation_history`` keyed by (session_id, message_order).
The orchestrator owns sequence numbers; this module only stores and reads.

Storage failures never reach the caller: a failed read is an empty history and
a failed write is logged and dropped, so the chat keeps answering while the
database is unavailable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..models import ConversationMessage, db

logger = logging.getLogger(__name__)

VALID_ROLES = {"system", "user", "assistant", "tool", "function"}


@dataclass
class HistoryMessage:
    """A conversation turn as read from or written to the store."""

    role: str
    content: Optional[str]
    tool_call_id: Optional[str] = None
    name: Optional[str] = None
    sequence: Optional[int] = None


def _to_message(row) -> HistoryMessage:
    return HistoryMessage(
        role=row.role,
        content=row.content,
        tool_call_id=row.tool_call_id,
        name=row.name,
        sequence=row.message_order,
    )


def load_recent(session_id: str, limit: int) -> list[HistoryMessage]:
    """Return at most ``limit`` most recent messages, oldest first."""
    try:
        rows = (
            ConversationMessage.query
            .filter_by(session_id=session_id)
            .order_by(ConversationMessage.message_order.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to load history for session %s", session_id)
        db.session.rollback()
        return []
    return [_to_message(r) for r in reversed(rows)]


def load_conversation(session_id: str, limit: int) -> list[dict]:
    """Return the first ``limit`` messages of a session in order, for display."""
    try:
        rows = (
            ConversationMessage.query
            .filter_by(session_id=session_id)
            .order_by(ConversationMessage.message_order.asc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        # Table not bootstrapped yet is the common case on a fresh install
        logger.warning("Could not read conversation for session %s", session_id, exc_info=True)
        db.session.rollback()
        return []
    return [r.to_dict() for r in rows]


def append(session_id: str, message: HistoryMessage, sequence: int) -> bool:
    """Store one message at ``sequence``. Returns False if the write was dropped."""
    if message.role not in VALID_ROLES:
        logger.error("Refusing to store message with role %r for session %s", message.role, session_id)
        return False

    row = ConversationMessage(
        session_id=session_id,
        message_order=sequence,
        role=message.role,
        content=message.content,
        tool_call_id=message.tool_call_id,
        name=message.name,
    )
    try:
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError:
        logger.exception(
            "Failed to save %s message #%d for session %s", message.role, sequence, session_id,
        )
        db.session.rollback()
        return False
    return True
