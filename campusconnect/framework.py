"""
CampusConnect Flask Extension
=============================

    app = Flask(__name__)
    CampusConnect(app)

Fills in configuration defaults, prepares the database, initialises the email
service and data service, and registers the waitlist and dashboard blueprints.
"""

import os
import logging
from datetime import datetime

from flask import Blueprint, jsonify
from flask_cors import CORS

from .core.config import Config
from .core.logging_service import LoggingService, db_log
from .modules.email import email_service
from .modules.notifications import create_notification_service

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'waitlist': True,
    'dashboard': True,
}

# Keys copied from Config into app.config when the app hasn't set them
CONFIG_KEYS = [
    'SECRET_KEY', 'DB_DIR', 'DATA_BACKEND', 'SUPABASE_URL', 'SUPABASE_KEY',
    'EMAIL_PROVIDER', 'EMAIL_ADDRESS', 'EMAIL_PASSWORD', 'EMAIL_HOST', 'EMAIL_PORT',
    'AWS_REGION', 'EMAIL_SEND_DELAY', 'RESEND_API_KEY', 'EMAIL_BRAND_NAME',
    'EMAIL_BRAND_TAGLINE', 'EMAIL_WEBSITE_URL', 'ADMIN_EMAIL', 'ADMIN_PASSWORD',
    'EMAIL_STYLE', 'CORS_ORIGINS',
]

# Shared layout and toasts, available whichever modules are enabled
layout_bp = Blueprint('campusconnect', __name__, template_folder='templates')


class CampusConnect:

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered = []
        self.email_service = email_service
        self.notifications = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config_defaults(app)
        self._setup_database_dir(app)

        LoggingService.db_path = app.config['DATABASE']

        self.email_service.init_app(app)
        self.notifications = create_notification_service(app, self.email_service)

        self._register_blueprints(app)
        self._register_health_route(app)

        origins = app.config.get('CORS_ORIGINS') or '*'
        if isinstance(origins, str) and origins != '*':
            origins = [o.strip() for o in origins.split(',') if o.strip()]
        CORS(app, resources={r"/api/*": {"origins": origins}})

        @app.context_processor
        def inject_brand():
            return {
                'brand_name': app.config.get('EMAIL_BRAND_NAME', 'CampusConnect'),
                'current_year': datetime.now().year,
                'admin_enabled': 'dashboard' in self._registered,
            }

        if not app.config.get('ADMIN_PASSWORD'):
            logger.warning("ADMIN_PASSWORD not configured - /admin is open to everyone")

        app.extensions['campusconnect'] = self
        logger.info(f"CampusConnect initialised with modules: {', '.join(self._registered)}")
        db_log('info', 'system', 'Application started', {'modules': self._registered})

    def _apply_config_defaults(self, app):
        for key in CONFIG_KEYS:
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)

        if not app.config.get('DATABASE'):
            app.config['DATABASE'] = os.getenv('DATABASE') or os.path.join(app.config['DB_DIR'], 'campusconnect.db')

        if 'brand_name' in self._config:
            app.config['EMAIL_BRAND_NAME'] = self._config['brand_name']

    def _setup_database_dir(self, app):
        # The app_logs table lives in DATABASE whichever backend holds the waitlist
        os.makedirs(os.path.dirname(os.path.abspath(app.config['DATABASE'])), exist_ok=True)

    def _features(self):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        return features

    def _register_blueprints(self, app):
        features = self._features()
        app.register_blueprint(layout_bp)

        if features.get('waitlist'):
            from .modules.waitlist import waitlist_bp
            app.register_blueprint(waitlist_bp)
            self._registered.append('waitlist')

        if features.get('dashboard'):
            from .modules.dashboard import dashboard_bp
            app.register_blueprint(dashboard_bp)
            self._registered.append('dashboard')

    def _register_health_route(self, app):
        def health():
            ok, detail = self.notifications.check()
            status = 'ok' if ok else 'critical'
            return jsonify({
                'status': status,
                'checks': {
                    'database': {'ok': ok, 'detail': detail},
                    'email': {'ok': self.email_service.is_configured, 'provider': self.email_service.provider},
                },
                'timestamp': datetime.now().isoformat(),
            }), 200 if ok else 503

        app.add_url_rule('/health', 'health', health)

    def get_registered_modules(self):
        return list(self._registered)
