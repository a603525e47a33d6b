"""
Admin Dashboard Routes
======================

Provides:
- GET /admin -- dashboard page (subscribers, stats, broadcast forms)
- POST /admin/send-update -- broadcast an update
- POST /admin/send-launch -- broadcast the launch notification
- POST /admin/refresh -- reload subscribers and stats
- GET|POST /admin/login, GET /admin/logout
- GET /admin/api/subscribers, GET /admin/api/stats, GET /admin/api/notifications
- GET /admin/api/logs -- recent persistent log entries
- POST /admin/api/send-update, POST /admin/api/send-launch
"""

import hashlib
import hmac
import logging
from datetime import datetime
from functools import wraps

from flask import render_template, request, redirect, url_for, flash, session, jsonify, current_app

from campusconnect.core.logging_service import LoggingService, db_log
from campusconnect.modules.notifications import get_notification_service, ServiceError
from . import dashboard_bp
from .state import AdminDashboard, SENT, MISSING, BLOCKED, FAILED

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    SENT: 200,
    MISSING: 400,
    BLOCKED: 409,
    FAILED: 500,
}


def hash_password(password):
    """Simple password hashing"""
    return hashlib.sha256(password.encode()).hexdigest()


def _login_enabled():
    return bool(current_app.config.get('ADMIN_PASSWORD'))


def require_admin(f):
    """Decorator to require admin login when ADMIN_PASSWORD is configured"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if _login_enabled() and 'admin_id' not in session:
            if request.path.startswith('/admin/api/'):
                return jsonify({'error': 'Authentication required'}), 401
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def _dashboard():
    brand_name = current_app.config.get('EMAIL_BRAND_NAME', 'CampusConnect')
    return AdminDashboard(get_notification_service(), brand_name)


@dashboard_bp.app_template_filter('format_date')
def format_date(value, fmt='%d %b %Y'):
    """Render a stored timestamp as a short date"""
    if not value:
        return ''
    if isinstance(value, datetime):
        return value.strftime(fmt)
    text = str(value).replace('Z', '+00:00')
    try:
        return datetime.fromisoformat(text).strftime(fmt)
    except ValueError:
        return text[:10]


# ===================
# AUTH
# ===================

@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if not _login_enabled():
        return redirect(url_for('admin.dashboard'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash(('Missing Information', 'Please enter both email and password'), 'error')
            return render_template('dashboard/login.html'), 400

        expected_email = (current_app.config.get('ADMIN_EMAIL') or '').strip().lower()
        expected_hash = hash_password(current_app.config['ADMIN_PASSWORD'])

        if email == expected_email and hmac.compare_digest(hash_password(password), expected_hash):
            session['admin_id'] = expected_email
            session['admin_email'] = expected_email
            db_log('info', 'dashboard', f'Admin login: {email}')

            next_page = request.args.get('next', '')
            if not next_page.startswith('/') or next_page.startswith('//'):
                next_page = url_for('admin.dashboard')
            return redirect(next_page)

        logger.warning(f"Failed admin login for {email}")
        db_log('warning', 'dashboard', 'Failed admin login', {'email': email})
        flash(('Login Failed', 'Invalid email or password'), 'error')
        return render_template('dashboard/login.html'), 401

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    session.pop('admin_id', None)
    session.pop('admin_email', None)
    flash(('Logged Out', 'You have been logged out'), 'info')
    return redirect(url_for('admin.login'))


# ===================
# DASHBOARD PAGE
# ===================

@dashboard_bp.route('')
@dashboard_bp.route('/')
@require_admin
def dashboard():
    """Admin dashboard page"""
    return render_template('dashboard/dashboard.html', dashboard=_dashboard().load())


@dashboard_bp.route('/send-update', methods=['POST'])
@require_admin
def send_update():
    dashboard = _dashboard().load()
    result = dashboard.send_update(request.form.get('title'), request.form.get('content'))
    flash((result.title, result.message), result.category)

    if result.outcome == SENT:
        return redirect(url_for('admin.dashboard'))

    # Keep what the admin typed so nothing is lost on a retry
    return render_template(
        'dashboard/dashboard.html',
        dashboard=dashboard,
        update_title=request.form.get('title', ''),
        update_content=request.form.get('content', ''),
    ), _STATUS_CODES[result.outcome]


@dashboard_bp.route('/send-launch', methods=['POST'])
@require_admin
def send_launch():
    result = _dashboard().load().send_launch_notification()
    flash((result.title, result.message), result.category)
    return redirect(url_for('admin.dashboard'))


@dashboard_bp.route('/refresh', methods=['POST'])
@require_admin
def refresh():
    return redirect(url_for('admin.dashboard'))


# ===================
# JSON API
# ===================

@dashboard_bp.route('/api/subscribers', methods=['GET'])
@require_admin
def api_subscribers():
    try:
        subscribers = get_notification_service().list_subscribers()
    except ServiceError as e:
        logger.error(f"Error listing subscribers: {e}")
        return jsonify({'error': 'Failed to load subscribers'}), 500

    return jsonify({
        'subscribers': subscribers,
        'total_count': len(subscribers),
    }), 200


@dashboard_bp.route('/api/stats', methods=['GET'])
@require_admin
def api_stats():
    try:
        stats = get_notification_service().get_stats()
    except ServiceError as e:
        logger.error(f"Error loading stats: {e}")
        return jsonify({'error': 'Failed to load stats'}), 500

    return jsonify(stats), 200


@dashboard_bp.route('/api/notifications', methods=['GET'])
@require_admin
def api_notifications():
    limit = request.args.get('limit', 20, type=int)
    try:
        notifications = get_notification_service().recent_notifications(max(1, min(limit, 200)))
    except ServiceError as e:
        logger.error(f"Error listing notifications: {e}")
        return jsonify({'error': 'Failed to load notifications'}), 500

    return jsonify({'notifications': notifications}), 200


def _action_response(dashboard, result):
    return jsonify({
        'outcome': result.outcome,
        'title': result.title,
        'message': result.message,
        'stats': dashboard.stats,
        'subscriber_count': dashboard.subscriber_count,
    }), _STATUS_CODES[result.outcome]


@dashboard_bp.route('/api/send-update', methods=['POST'])
@require_admin
def api_send_update():
    data = request.get_json(silent=True) or {}
    dashboard = _dashboard().load()
    result = dashboard.send_update(data.get('title'), data.get('content'))
    return _action_response(dashboard, result)


@dashboard_bp.route('/api/send-launch', methods=['POST'])
@require_admin
def api_send_launch():
    dashboard = _dashboard().load()
    result = dashboard.send_launch_notification()
    return _action_response(dashboard, result)


@dashboard_bp.route('/api/logs', methods=['GET'])
@require_admin
def api_logs():
    """Recent app_logs entries, optionally for one source"""
    limit = request.args.get('limit', 50, type=int)
    source = request.args.get('source') or None
    return jsonify({'logs': LoggingService.recent(max(1, min(limit, 500)), source)}), 200
