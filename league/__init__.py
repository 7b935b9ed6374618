import os
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate, upgrade
from dotenv import load_dotenv

# Load environment variables (override=True ensures .env values take precedence)
load_dotenv(override=True)

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key',
}


def create_app(config_name=None, test_config=None):
    """Application factory pattern."""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-me')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///dev.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO').upper()

    if config_name == 'testing':
        app.config.update(TEST_CONFIG)
    if test_config:
        app.config.update(test_config)

    # Fix for postgres:// vs postgresql:// (some providers use older postgres:// format)
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # Register blueprints
    from league.routes.main import main_bp
    from league.routes.api import api_bp
    from league.routes.matches import matches_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(matches_bp)

    from league.cli import register_commands
    register_commands(app)

    # Import models so they're known to Flask-Migrate
    from league import models

    # Auto-run migrations when deployed
    if os.environ.get('RUN_MIGRATIONS_ON_START') and not app.config.get('TESTING'):
        with app.app_context():
            upgrade()

    return app
