import logging
import os

from flask import Flask
from flask_wtf.csrf import CSRFProtect
from sqlalchemy.exc import SQLAlchemyError

from .auth import auth_bp
from .models import db
from .recipes import recipes_bp
from .uploads import uploads_bp

csrf = CSRFProtect()


def _load_config(app, config):
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret-key-change-me')
    # relative sqlite paths land in the instance folder
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///recipes.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['UPLOAD_FOLDER'] = os.getenv('UPLOAD_FOLDER', os.path.join(app.root_path, 'uploads'))
    app.config['MAX_CONTENT_LENGTH'] = int(os.getenv('MAX_UPLOAD_BYTES', str(32 * 1024 * 1024)))
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    if config:
        app.config.update(config)


def _open_store(app):
    """Create the schema, aborting startup if the database cannot be opened."""
    with app.app_context():
        try:
            db.create_all()
        except SQLAlchemyError:
            app.logger.critical('Could not open the recipe store at %s',
                                app.config['SQLALCHEMY_DATABASE_URI'])
            raise


def create_app(config=None):
    app = Flask(__name__, instance_relative_config=True)
    _load_config(app, config)
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    os.makedirs(app.instance_path, exist_ok=True)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    db.init_app(app)
    csrf.init_app(app)

    # ---------------- Blueprints ----------------
    app.register_blueprint(auth_bp)
    app.register_blueprint(recipes_bp)
    app.register_blueprint(uploads_bp)

    _open_store(app)
    app.logger.info('Recipe store ready, uploads in %s', app.config['UPLOAD_FOLDER'])
    return app


def main():
    app = create_app()
    try:
        app.run(host=os.getenv('HOST', '0.0.0.0'), port=int(os.getenv('PORT', '8080')),
                debug=os.getenv('FLASK_DEBUG') == '1')
    finally:
        with app.app_context():
            db.engine.dispose()


if __name__ == '__main__':
    main()
