import logging
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect
from config import Config
from core.periods import utc_now
from core.storage import StorageError
from routes.dashboard import dashboard_bp
from routes.expenses import expenses_bp
from routes.settings import settings_bp
from routes.history import history_bp
from routes.auth import auth_bp
from routes.goal import goal_bp
from routes.insights import advisor_bp

csrf = CSRFProtect()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        import secrets
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

    config_class.init_db(app)
    config_class.init_advisor(app)
    app.clock = utc_now

    csrf.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(history_bp)
    app.register_blueprint(goal_bp)
    app.register_blueprint(advisor_bp)

    @app.errorhandler(StorageError)
    def storage_unavailable(exc):
        app.logger.error("Storage unavailable: %s", exc)
        return jsonify({"error": "storage unavailable"}), 503

    return app

if __name__ == "__main__":
    create_app().run(debug=True)
