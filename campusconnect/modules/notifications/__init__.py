"""
Notifications Module
====================

Provides:
- NotificationService -- subscriber persistence, notification log, broadcasts
- SQLiteStore / SupabaseStore -- storage backends selected by DATA_BACKEND
- DuplicateSubscriberError / ServiceError

Helpers:
- create_notification_service(app, email_service)
- get_notification_service()
"""

from flask import current_app

from .errors import ServiceError, DuplicateSubscriberError
from .service import NotificationService
from .store import SQLiteStore
from .rest_store import SupabaseStore


def create_notification_service(app, email_service):
    """Build the service for the backend named in app.config['DATA_BACKEND']"""
    backend = (app.config.get('DATA_BACKEND') or 'sqlite').lower()
    if backend == 'supabase':
        store = SupabaseStore(app.config.get('SUPABASE_URL'), app.config.get('SUPABASE_KEY'))
    elif backend == 'sqlite':
        store = SQLiteStore(app.config['DATABASE'])
    else:
        raise ValueError(f"Unknown DATA_BACKEND: {backend}")

    store.init()
    return NotificationService(store, email_service)


def get_notification_service():
    """The service registered on the current app"""
    return current_app.extensions['campusconnect'].notifications


__all__ = [
    'NotificationService', 'SQLiteStore', 'SupabaseStore',
    'ServiceError', 'DuplicateSubscriberError',
    'create_notification_service', 'get_notification_service',
]
