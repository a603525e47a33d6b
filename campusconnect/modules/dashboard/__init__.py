"""
Dashboard Module
================

Admin dashboard for the waitlist.

Provides:
- Subscriber list and stats
- Send Update / Send Launch Notification broadcasts
- Optional admin login (enabled when ADMIN_PASSWORD is set)
- JSON API under /admin/api
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so url_for('admin.dashboard') reads naturally
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates',
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
