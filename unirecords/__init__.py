from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db, migrate, login_manager, storage
from .errors import RecordsError

def configure_logging(app):
    # app.logger is the "unirecords" logger; service module loggers propagate to it
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

def register_error_handlers(app):
    @app.errorhandler(RecordsError)
    def records_error(err):
        if err.status_code >= 500:
            app.logger.error("Unhandled records error: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def http_error(err):
        return jsonify({"error": err.description}), err.code

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Login required"}), 401

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    storage.init_app(app)

    from . import models
    from .models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from .blueprints.auth import bp as auth_bp
    from .blueprints.admin import bp as admin_bp
    from .blueprints.teacher import bp as teacher_bp
    from .blueprints.student import bp as student_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(teacher_bp, url_prefix="/teacher")
    app.register_blueprint(student_bp, url_prefix="/student")
    register_error_handlers(app)

    from .cli import register_commands
    register_commands(app)

    app.logger.debug("unirecords app created with %s", config_object)
    return app
