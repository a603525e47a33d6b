"""
Waitlist Module
===============

Provides:
- GET / -- "coming soon" landing page with the signup form
- POST / -- browser form submit (flash toast + redirect)
- POST /api/waitlist -- JSON signup for separately hosted frontends
"""

from flask import Blueprint

waitlist_bp = Blueprint(
    'waitlist',
    __name__,
    template_folder='templates',
)

from . import routes
