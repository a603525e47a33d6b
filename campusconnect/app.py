"""
CampusConnect Application
=========================

Run with:
    python -m campusconnect.app

Or with the Flask CLI:
    flask --app campusconnect.app run

Visit:
    http://localhost:5000        - Landing page with the waitlist form
    http://localhost:5000/admin  - Admin panel
"""

import logging
from flask import Flask

from campusconnect import CampusConnect
from campusconnect.core.config import Config


def create_app(test_config=None):
    """Application factory"""
    app = Flask(__name__)

    # Session security
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    if test_config:
        app.config.update(test_config)

    CampusConnect(app)
    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app = create_app()

    print("\n" + "=" * 60)
    print("CampusConnect")
    print("=" * 60)
    print(f"Homepage:        http://localhost:{Config.port}")
    print(f"Admin Panel:     http://localhost:{Config.port}/admin")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
