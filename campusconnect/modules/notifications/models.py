"""
Notifications Models
====================

Record shapes shared by the storage backends. Rows travel as plain dicts:

Subscriber:
    email, first_name, is_active, created_at

NotificationRecord:
    type, title, content, recipient_email, success, timestamp
"""

NOTIFICATION_WELCOME = 'welcome'
NOTIFICATION_UPDATE = 'update'
NOTIFICATION_LAUNCH = 'launch'

NOTIFICATION_TYPES = (NOTIFICATION_WELCOME, NOTIFICATION_UPDATE, NOTIFICATION_LAUNCH)


def new_subscriber(email, first_name):
    """Normalise a signup into an insertable subscriber record"""
    return {
        'email': (email or '').strip().lower(),
        'first_name': (first_name or '').strip(),
        'is_active': True,
    }


def new_notification(type, title, content, recipient_email, success=True):
    """Build a notification log record, rejecting unknown types"""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type!r}")
    return {
        'type': type,
        'title': title,
        'content': content,
        'recipient_email': recipient_email,
        'success': bool(success),
    }


def subscriber_from_row(row):
    """Convert a sqlite3.Row or JSON object to a subscriber dict"""
    d = dict(row)
    return {
        'email': d.get('email'),
        'first_name': d.get('first_name'),
        'is_active': bool(d.get('is_active', True)),
        'created_at': d.get('created_at'),
    }
