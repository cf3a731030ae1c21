# app.py
# Flask application built with the Application Factory pattern

import logging
import os
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from config import Config
from extensions import db, migrate

# Models must be imported here so that Flask-Migrate (Alembic) can see them
from models import User, Event, Team, Criterion, Score, TeamJudge, LeaderboardEntry

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    os.makedirs(os.path.join(app.config['BASE_DIR'], 'instance'), exist_ok=True)
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)

    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)

    # Every error leaves the API as {"error": "..."}
    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    from seed_data import seed_demo_command
    app.cli.add_command(seed_demo_command)

    return app
