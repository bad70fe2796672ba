"""
Mailforge - Email Marketing Builders for Flask
==============================================

Visual builders for an email marketing product, as Flask blueprints:
- Campaign builder (block-based HTML emails)
- Automation workflow builder (trigger/action/condition/delay graph)
- Landing page builder (section-based pages)
- Template gallery

Usage:
    from flask import Flask
    from mailforge import Mailforge

    app = Flask(__name__)
    mailforge = Mailforge(app)

    # or, with an app factory
    mailforge = Mailforge()
    mailforge.init_app(app, {'features': {'templates': False}})
"""

import os
import logging

from flask_cors import CORS

from .core.auth import AuthContext
from .core.config import Config
from .editor.sessions import EditorSessionStore

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'auth': True,
    'campaigns': True,
    'automations': True,
    'landing_pages': True,
    'templates': True,
}


class Mailforge:
    """Flask extension that wires the builders into an application.

    Config (app.config, falling back to Config / environment):
        DB_DIR: directory for the sqlite databases
        BUILDER_DB: builder records (default DB_DIR/builder.db)
        LOG_DB: persistent application log (default DB_DIR/app_logs.db)
        RECORD_STORE: 'sqlite' (default) or 'http'
        CORS_ORIGINS: comma separated origins allowed on /api/*, '*' for any
    """

    def __init__(self, app=None, config=None):
        self._config = {}
        self._registered = []
        self.auth = None
        self.sessions = None
        if app is not None:
            self.init_app(app, config)

    def init_app(self, app, config=None):
        self._config = dict(config or {})
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        self._config['features'] = features

        self._apply_defaults(app)
        self._setup_database_dir(app)

        self.auth = AuthContext()
        self.sessions = EditorSessionStore(self.auth)

        self._register_modules(app, features)
        self._setup_cors(app)

        app.extensions['mailforge'] = self
        logger.info(f"Mailforge initialised with modules: {', '.join(self._registered)}")
        return self

    def _apply_defaults(self, app):
        app.config.setdefault('DB_DIR', Config.DB_DIR)
        db_dir = app.config['DB_DIR']
        app.config.setdefault('BUILDER_DB', os.path.join(db_dir, 'builder.db'))
        app.config.setdefault('LOG_DB', os.path.join(db_dir, 'app_logs.db'))
        app.config.setdefault('RECORD_STORE', Config.RECORD_STORE)
        app.config.setdefault('CORS_ORIGINS', Config.CORS_ORIGINS)
        if not app.config.get('SECRET_KEY') and Config.SECRET_KEY:
            app.config['SECRET_KEY'] = Config.SECRET_KEY

    def _setup_database_dir(self, app):
        db_dir = app.config.get('DB_DIR')
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _register_modules(self, app, features):
        if features.get('auth'):
            from .modules.auth import auth_bp
            app.register_blueprint(auth_bp)
            self._registered.append('auth')

        if features.get('campaigns'):
            from .modules.campaigns import campaigns_bp
            app.register_blueprint(campaigns_bp)
            self._registered.append('campaigns')

        if features.get('automations'):
            from .modules.automations import automations_bp
            app.register_blueprint(automations_bp)
            self._registered.append('automations')

        if features.get('landing_pages'):
            from .modules.landing_pages import landing_pages_bp
            app.register_blueprint(landing_pages_bp)
            self._registered.append('landing_pages')

        if features.get('templates'):
            from .modules.templates import templates_bp
            app.register_blueprint(templates_bp)
            self._registered.append('templates')

    def _setup_cors(self, app):
        origins = app.config.get('CORS_ORIGINS') or '*'
        if isinstance(origins, str) and origins != '*':
            origins = [origin.strip() for origin in origins.split(',') if origin.strip()]
        CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    def get_registered_modules(self):
        return list(self._registered)

    def close(self):
        """Release the session store's auth subscription and drop open sessions"""
        if self.sessions is not None:
            self.sessions.close()


__all__ = ['Mailforge', '__version__']
