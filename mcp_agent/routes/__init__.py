from .agent_routes import agent_bp
from .health import health_bp


def register_blueprints(app):
    app.register_blueprint(health_bp)
    app.register_blueprint(agent_bp)
