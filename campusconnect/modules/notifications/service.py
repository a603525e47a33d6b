"""
Notification Service
====================

The data/notification API the signup form and admin dashboard talk to:

- insert_subscriber(record)
- record_notification(record)
- list_subscribers()
- get_stats()
- send_update({title, content, recipients})
- send_launch_notification()

Persistence is delegated to a store (SQLiteStore or SupabaseStore) and email
delivery to the EmailService.
"""

import logging
from typing import Any, Dict, List

from campusconnect.core.logging_service import db_log
from .errors import ServiceError
from .models import (
    NOTIFICATION_LAUNCH, NOTIFICATION_UPDATE, NOTIFICATION_WELCOME,
    new_notification, new_subscriber,
)

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, store, email_service):
        self.store = store
        self.email_service = email_service

    # ===================
    # SUBSCRIBERS
    # ===================

    def insert_subscriber(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a subscriber.

        Raises:
            DuplicateSubscriberError: the email is already on the list
            ServiceError: any other storage failure
        """
        subscriber = self.store.insert_subscriber(new_subscriber(record.get('email'), record.get('first_name')))
        logger.info(f"New subscriber added: {subscriber['email']}")
        db_log('info', 'notifications', f"New subscriber: {subscriber['email']}")
        return subscriber

    def list_subscribers(self) -> List[Dict[str, Any]]:
        return self.store.list_subscribers()

    def get_stats(self) -> Dict[str, int]:
        """Counts computed on every call"""
        return {
            'total_subscribers': self.store.count_active_subscribers(),
            'total_notifications': self.store.count_notifications(),
        }

    # ===================
    # NOTIFICATION LOG
    # ===================

    def record_notification(self, record: Dict[str, Any]) -> None:
        """Append one entry to the notification log"""
        self.store.insert_notification(new_notification(
            record.get('type'),
            record.get('title'),
            record.get('content'),
            record.get('recipient_email'),
            record.get('success', True),
        ))

    def recent_notifications(self, limit=20) -> List[Dict[str, Any]]:
        return self.store.list_notifications(limit)

    def send_welcome(self, email: str, first_name: str) -> bool:
        """
        Email the welcome message (when a provider is configured) and log it.
        Returns whether the email was delivered.
        """
        subject, _, _ = self.email_service.welcome_message(first_name)
        delivered = False
        if self.email_service.is_configured:
            delivered = self.email_service.send_welcome_email(email, first_name)

        self.record_notification({
            'type': NOTIFICATION_WELCOME,
            'title': subject,
            'content': f'Thank you for subscribing to {self.email_service.brand_name} updates.',
            'recipient_email': email,
            'success': delivered or not self.email_service.is_configured,
        })
        return delivered

    # ===================
    # BROADCASTS
    # ===================

    def send_update(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Email an update to the given recipients, one log record per recipient.

        Args:
            request: {'title': str, 'content': str, 'recipients': [email, ...]}
        """
        title = request.get('title')
        content = request.get('content')
        recipients = list(request.get('recipients') or [])
        if not title or not content:
            raise ValueError("title and content are required")

        results = self.email_service.send_update_email(recipients, title, content) if recipients else {}
        summary = self._log_broadcast(NOTIFICATION_UPDATE, title, content, recipients, results)
        logger.info(f"Update '{title}' sent: {summary['sent']} succeeded, {summary['failed']} failed")
        db_log('info', 'notifications', 'Update broadcast sent', dict(summary, title=title))
        return summary

    def send_launch_notification(self) -> Dict[str, Any]:
        """Email the fixed launch announcement to every active subscriber"""
        recipients = [s['email'] for s in self.list_subscribers()]
        title, content = self.email_service.launch_message()

        results = self.email_service.send_launch_email(recipients) if recipients else {}
        summary = self._log_broadcast(NOTIFICATION_LAUNCH, title, content, recipients, results)
        logger.info(f"Launch notification sent: {summary['sent']} succeeded, {summary['failed']} failed")
        db_log('info', 'notifications', 'Launch broadcast sent', summary)
        return summary

    def _log_broadcast(self, type, title, content, recipients, results):
        sent = 0
        for email in recipients:
            success = bool(results.get(email))
            sent += 1 if success else 0
            self.record_notification({
                'type': type,
                'title': title,
                'content': content,
                'recipient_email': email,
                'success': success,
            })
        return {'recipients': len(recipients), 'sent': sent, 'failed': len(recipients) - sent}

    def check(self):
        """(ok, detail) for the health endpoint"""
        try:
            return self.store.check()
        except ServiceError as e:
            return False, str(e)
