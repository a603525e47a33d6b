"""
Waitlist Routes
===============

Provides:
- GET / -- landing page
- POST / -- subscribe from the landing page form
- POST /api/waitlist -- subscribe via JSON

Error kinds:
- missing/invalid fields -- 400, no service call
- already subscribed -- soft success
- anything else -- generic failure, form kept for retry
"""

import logging
from flask import request, jsonify, render_template, flash, redirect, url_for, current_app

from campusconnect.core.logging_service import LoggingService
from campusconnect.modules.notifications import get_notification_service
from . import waitlist_bp
from .forms import SignupForm, SignupResult, SUBSCRIBED, DUPLICATE, MISSING, INVALID, ERROR

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    SUBSCRIBED: 201,
    DUPLICATE: 200,
    MISSING: 400,
    INVALID: 400,
    ERROR: 500,
}


def _get_brand_name():
    """Get the brand name for user-facing messages"""
    return current_app.config.get('EMAIL_BRAND_NAME', 'CampusConnect')


def _submit(form):
    """Run the form submit, turning unexpected failures into the generic error toast"""
    try:
        return form.submit(get_notification_service(), _get_brand_name())
    except Exception as e:
        logger.error(f"Error in subscribe: {e}")
        LoggingService.log_error_with_traceback('waitlist', e, {'email': form.email})
        return SignupResult(ERROR, 'Error', 'Something went wrong. Please try again.')


# ===================
# PAGE ROUTES
# ===================

@waitlist_bp.route('/', methods=['GET'])
def index():
    """Coming soon landing page"""
    return render_template('waitlist/index.html', form=SignupForm())


@waitlist_bp.route('/', methods=['POST'])
def subscribe_form():
    """Handle the landing page form post"""
    form = SignupForm.from_data(request.form)
    result = _submit(form)

    flash((result.title, result.message), result.category)
    if result.clears_form:
        return redirect(url_for('waitlist.index'))

    return render_template('waitlist/index.html', form=form), _STATUS_CODES[result.outcome]


# ===================
# PUBLIC API ROUTES
# ===================

@waitlist_bp.route('/api/waitlist', methods=['POST'])
def subscribe_api():
    """JSON signup: {firstName|first_name, email, notify|consent}"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    form = SignupForm.from_data(data)
    result = _submit(form)

    return jsonify({
        'outcome': result.outcome,
        'title': result.title,
        'message': result.message,
    }), _STATUS_CODES[result.outcome]
