import traceback

from flask import Flask, jsonify
from flask_cors import CORS

from .config import Config
from .models import db
from .routes import register_blueprints


def create_app():
    app = Flask(__name__)
    app.config.from_object(Config)

    CORS(app, origins=app.config["CORS_ORIGINS"])
    db.init_app(app)
    register_blueprints(app)

    # The history table belongs to this service; campaigns and daily_metrics
    # are owned by the dashboard and never created here.
    with app.app_context():
        from .models import ConversationMessage
        try:
            ConversationMessage.__table__.create(db.engine, checkfirst=True)
        except Exception as e:
            db.session.rollback()
            app.logger.warning("Could not create conversation history table: %s", e)

    # Register agent tools with the tool registry
    from .services.campaign_tools import CAMPAIGN_TOOLS
    from .services.navigation_tools import NAVIGATION_TOOLS
    from .services.tool_registry import register_tool

    for tool in NAVIGATION_TOOLS + CAMPAIGN_TOOLS:
        try:
            register_tool(tool)
        except ValueError:
            pass  # Already registered (e.g. during testing)

    @app.errorhandler(500)
    def handle_500(e):
        app.logger.error("Unhandled 500:\n%s", traceback.format_exc())
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(404)
    def handle_404(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_405(e):
        response = jsonify({"error": "Method not allowed"})
        response.status_code = 405
        allowed = [m for m in (getattr(e, "valid_methods", None) or []) if m not in ("HEAD", "OPTIONS")]
        if allowed:
            response.headers["Allow"] = ", ".join(sorted(allowed))
        return response

    return app
