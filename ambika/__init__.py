import os
import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from dotenv import load_dotenv

from .config import DevConfig, ProdConfig, TestConfig

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()

CONFIGS = {
    'development': DevConfig,
    'production': ProdConfig,
    'testing': TestConfig,
}


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """Application factory with environment based configuration."""
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    os.makedirs(app.instance_path, exist_ok=True)

    # Pick configuration
    env = config_name or os.getenv('ENV') or os.getenv('FLASK_ENV') or 'production'
    app.config.from_object(CONFIGS.get(env, ProdConfig))
    app.config.update(overrides)

    # Initialise logging
    level = app.config.get('LOG_LEVEL') or ('DEBUG' if app.debug else 'INFO')
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    db.init_app(app)
    migrate.init_app(app, db)

    # Ensure models loaded so tables can be created
    from ambika import models  # noqa
    with app.app_context():
        db.create_all()

    from ambika.errors import register_error_handlers
    register_error_handlers(app)

    @app.route('/healthz')
    def healthz():
        return jsonify(status='ok')

    from ambika.orders.routes import bp as orders_bp
    from ambika.estimates.routes import bp as estimates_bp
    from ambika.inventory.routes import bp as inventory_bp
    from ambika.auth.routes import bp as auth_bp
    from ambika.admin import bp as admin_bp
    from ambika.resources import blueprints as resource_bps
    from ambika.cli import create_admin_cli, clear_db_cli

    app.register_blueprint(orders_bp, url_prefix='/api/orders')
    app.register_blueprint(estimates_bp, url_prefix='/api/estimates')
    app.register_blueprint(inventory_bp, url_prefix='/api/inventory')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    for prefix, resource_bp in resource_bps.items():
        app.register_blueprint(resource_bp, url_prefix=f'/api/{prefix}')

    app.cli.add_command(create_admin_cli)
    app.cli.add_command(clear_db_cli)

    return app
