import uuid

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _uuid_default():
    return str(uuid.uuid4())


class ConversationMessage(db.Model):
    """One turn of an agent conversation, ordered by ``message_order`` within a session."""

    __tablename__ = "mcp_conversation_history"
    __table_args__ = (
        db.UniqueConstraint("session_id", "message_order", name="uq_mcp_history_session_order"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    session_id = db.Column(db.String(255), nullable=False, index=True)
    message_order = db.Column(db.Integer, nullable=False)
    role = db.Column(db.String(20), nullable=False)
    content = db.Column(db.Text)
    tool_call_id = db.Column(db.String(255))
    name = db.Column(db.String(255))
    created_at = db.Column(db.DateTime(timezone=True), server_default=db.func.current_timestamp())

    def to_dict(self):
        return {
            "role": self.role,
            "content": self.content,
            "tool_call_id": self.tool_call_id,
            "name": self.name,
            "message_order": self.message_order,
        }


class Campaign(db.Model):
    __tablename__ = "campaigns"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_default)
    name = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(50), default="draft")
    budget = db.Column(db.Numeric(12, 2))
    daily_budget = db.Column(db.Numeric(12, 2))
    cost_traffic = db.Column(db.Numeric(12, 2))
    cost_creative = db.Column(db.Numeric(12, 2))
    cost_operational = db.Column(db.Numeric(12, 2))
    created_at = db.Column(db.DateTime(timezone=True), server_default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime(timezone=True), server_default=db.func.current_timestamp())


class DailyMetric(db.Model):
    __tablename__ = "daily_metrics"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    campaign_id = db.Column(db.String(36), db.ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    cost = db.Column(db.Numeric(12, 2), default=0)
    revenue = db.Column(db.Numeric(12, 2), default=0)
    clicks = db.Column(db.Integer, default=0)
    leads = db.Column(db.Integer, default=0)
