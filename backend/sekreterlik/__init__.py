from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()

DEFAULT_DATABASE_URL = 'sqlite:///sekreterlik.db'


def _is_memory_db(url: str) -> bool:
    return url.endswith(':memory:')


def _build_engine(url: str):
    if _is_memory_db(url):
        # one connection shared by every session, otherwise each sees an empty database
        return create_engine(url, future=True, connect_args={'check_same_thread': False}, poolclass=StaticPool)
    return create_engine(url, future=True)


def _error_body(status: int, title: str, detail: str):
    return {'error': {'status': status, 'title': title, 'detail': detail}}, status


def _register_error_handlers(app: Flask):
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return _error_body(e.code, e.name, e.description)
        app.logger.exception('Unhandled exception on %s', app.name)
        return _error_body(500, 'Internal Server Error', 'Unexpected error')


def _register_blueprints(app: Flask):
    from .routes.auth import auth_bp
    from .routes.permissions import perm_bp, catalog_bp
    from .routes.audit import audit_bp
    from .routes.pages import pages_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(perm_bp, url_prefix='/permissions')
    app.register_blueprint(catalog_bp)
    app.register_blueprint(audit_bp, url_prefix='/audit')
    app.register_blueprint(pages_bp)


def create_app(config: Optional[Dict[str, Any]] = None):
    """Build the access API: auth, position permissions, audit and guarded pages."""
    global db_engine, SessionLocal
    from .config import settings

    app = Flask(__name__)
    app.config.update(
        JWT_SECRET_KEY=os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        DATABASE_URL=os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL),
        STRICT_PERMISSION_KEYS=settings.STRICT_PERMISSION_KEYS,
    )
    if config:
        app.config.update(config)

    db_url = app.config['DATABASE_URL']
    db_engine = _build_engine(db_url)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    @app.teardown_appcontext
    def remove_session(exc):  # type: ignore
        # in-memory databases live as long as their session
        if SessionLocal is not None and not _is_memory_db(db_url):
            SessionLocal.remove()

    return app


def get_db():
    return SessionLocal()
