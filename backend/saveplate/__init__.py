from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from datetime import timedelta
from typing import Optional, Dict, Any
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()

REDOC_PAGE = """<!DOCTYPE html>
<html><head><title>SavePlate API</title>
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css" />
</head><body><redoc spec-url="/openapi.json"></redoc>
<script src="https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js"></script>
</body></html>"""


def _env_config() -> Dict[str, Any]:
    return {
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///saveplate.db'),
        'JWT_ACCESS_TOKEN_EXPIRES': timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '12'))),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
    }


def _make_engine(db_url: str):
    if db_url.endswith(':memory:'):
        # every session must see the same in-memory database
        return create_engine(
            db_url,
            future=True,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
    return create_engine(db_url, future=True)


def _register_blueprints(app: Flask):
    from .routes.auth import auth_bp
    from .routes.navigation import nav_bp
    from .routes.waste import waste_bp
    from .routes.locations import locations_bp
    from .routes.reports import reports_bp
    from .routes.consent import consent_bp
    from .routes.knowledge_base import kb_bp
    from .routes.marketing import marketing_bp
    from .routes.audit import audit_bp
    from .routes.vendors import vendors_bp
    from .routes.inventory import inventory_bp
    from .routes.purchase_orders import po_bp
    for bp, prefix in (
        (auth_bp, '/auth'),
        (nav_bp, '/nav'),
        (waste_bp, '/waste'),
        (locations_bp, '/locations'),
        (reports_bp, '/reports'),
        (consent_bp, '/consent'),
        (kb_bp, '/kb'),
        (marketing_bp, '/marketing'),
        (audit_bp, '/audit'),
        (vendors_bp, '/vendors'),
        (inventory_bp, '/inventory'),
        (po_bp, '/purchase-orders'),
    ):
        app.register_blueprint(bp, url_prefix=prefix)


def _error_body(status: int, title: str, detail: Optional[str]):
    return {'error': {'status': status, 'title': title, 'detail': detail}}, status


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)
    app.config.update(_env_config())
    if config:
        # tests and scripts override env-derived values here
        app.config.update(config)

    app.logger.setLevel(app.config['LOG_LEVEL'])

    db_engine = _make_engine(app.config['DATABASE_URL'])
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    _register_blueprints(app)

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return _error_body(e.code, e.name, e.description)
        app.logger.exception('Unhandled exception')
        return _error_body(500, 'Internal Server Error', 'Unexpected error')

    from .openapi import build_openapi_spec

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec(app)

    @app.route('/docs')
    def docs_index():
        return REDOC_PAGE

    app.logger.debug('app created with database %s', app.config['DATABASE_URL'])
    return app


def get_db():
    return SessionLocal()
