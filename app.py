# app.py
import logging

from flask import Flask, jsonify, send_from_directory
from sqlalchemy import text
from config.config import Config
from db.database import SessionLocal, init_db, auto_migrate
from utils.auth import init_auth
from utils.email_service import init_mail
from utils.errors import register_error_handlers
from utils.uploads import certification_folder
from routes.auth import bp as auth_bp
from routes.chef_applications import bp as chef_applications_bp
from routes.chef_approval import bp as chef_approval_bp
from routes.manage_users import bp as manage_users_bp
from flask_cors import CORS

def create_app(overrides=None):
    app = Flask(__name__)

    # Load config values from Config
    app.config["DEBUG"] = Config.DEBUG
    app.config["FROM_EMAIL"] = Config.FROM_EMAIL
    app.config["ADMIN_EMAIL"] = Config.ADMIN_EMAIL
    app.config["NO_REPLY_EMAIL"] = Config.NO_REPLY_EMAIL

    app.config["JWT_SECRET"] = Config.JWT_SECRET
    app.config["JWT_ISSUER"] = Config.JWT_ISSUER
    app.config["JWT_EXPIRE_MINUTES"] = Config.JWT_EXPIRE_MINUTES

    app.config["UPLOAD_FOLDER"] = Config.UPLOAD_FOLDER
    app.config["MAX_UPLOAD_BYTES"] = Config.MAX_UPLOAD_BYTES

    # Flask-Mail config
    app.config["MAIL_SERVER"] = Config.MAIL_SERVER
    app.config["MAIL_PORT"] = Config.MAIL_PORT
    app.config["MAIL_USERNAME"] = Config.MAIL_USERNAME
    app.config["MAIL_PASSWORD"] = Config.MAIL_PASSWORD
    app.config["MAIL_USE_TLS"] = Config.MAIL_USE_TLS
    app.config["MAIL_USE_SSL"] = Config.MAIL_USE_SSL
    app.config["MAIL_SUPPRESS_SEND"] = Config.MAIL_SUPPRESS_SEND
    # Prefer NO_REPLY_EMAIL as the default for outgoing system messages when configured
    app.config["MAIL_DEFAULT_SENDER"] = Config.NO_REPLY_EMAIL or Config.FROM_EMAIL

    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(getattr(logging, Config.LOG_LEVEL, logging.INFO))

    # CORS
    CORS(app, origins=Config.ALLOWED_ORIGINS, supports_credentials=True)

    # Ensure DB schema exists and apply safe auto-migrations (adds missing tables/columns)
    try:
        auto_migrate()
    except Exception:
        app.logger.exception("auto_migrate failed, falling back to init_db()")
        init_db()

    init_mail(app)
    init_auth(app)
    register_error_handlers(app)

    # register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(chef_applications_bp, url_prefix="/api/chefapplications")
    # route name used by the existing frontend client
    app.register_blueprint(chef_applications_bp, url_prefix="/api/ChefApplication", name="chef_application")
    app.register_blueprint(chef_approval_bp)
    app.register_blueprint(manage_users_bp)

    @app.teardown_appcontext
    def remove_session(exc=None):
        SessionLocal.remove()

    @app.route("/certifications/<path:filename>", methods=["GET"])
    def certification_file(filename):
        return send_from_directory(certification_folder(app.config["UPLOAD_FOLDER"]), filename)

    @app.route("/", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/health/db", methods=["GET"])
    def health_db():
        """Simple DB health check endpoint.
        Returns 200 if DB is reachable and a basic select 1 works, otherwise returns 503.
        """
        from db.database import engine
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return jsonify({"db": "ok"})
        except Exception as e:
            app.logger.exception("DB health check failed: %s", e)
            return jsonify({"db": "error", "error": str(e)}), 503

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host=Config.APP_HOST, port=Config.APP_PORT, debug=Config.DEBUG)
