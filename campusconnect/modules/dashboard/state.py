"""
Admin Dashboard State
=====================

Loads subscribers and stats for the admin screen and runs the two broadcast
actions. Only one send runs at a time across the process; a second request
while one is in flight is rejected without touching the service.
"""

import logging
import threading
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

from campusconnect.core.logging_service import db_log

logger = logging.getLogger(__name__)

_send_lock = threading.Lock()

# Action outcomes
SENT = 'sent'
MISSING = 'missing'
BLOCKED = 'blocked'
FAILED = 'failed'


class ActionResult(namedtuple('ActionResult', ['outcome', 'title', 'message'])):

    @property
    def category(self):
        if self.outcome == SENT:
            return 'success'
        if self.outcome in (MISSING, BLOCKED):
            return 'warning'
        return 'error'


class AdminDashboard:
    """Per-request view state for /admin"""

    def __init__(self, service, brand_name='CampusConnect'):
        self.service = service
        self.brand_name = brand_name
        self.subscribers = []
        self.stats = {'total_subscribers': 0, 'total_notifications': 0}
        self.load_errors = {}

    @property
    def subscriber_count(self):
        return len(self.subscribers)

    @property
    def is_sending(self):
        return _send_lock.locked()

    @property
    def can_send(self):
        return not self.is_sending and self.subscriber_count > 0

    def load(self):
        """Fetch the subscriber list and stats in parallel; each may fail on its own"""
        self.load_errors = {}
        with ThreadPoolExecutor(max_workers=2) as pool:
            subscribers_future = pool.submit(self.service.list_subscribers)
            stats_future = pool.submit(self.service.get_stats)

        try:
            self.subscribers = subscribers_future.result()
        except Exception as e:
            logger.error(f"Error loading subscribers: {e}")
            self.load_errors['subscribers'] = str(e)

        try:
            self.stats = stats_future.result()
        except Exception as e:
            logger.error(f"Error loading stats: {e}")
            self.load_errors['stats'] = str(e)

        return self

    def refresh(self):
        return self.load()

    def _blocked(self):
        if self.is_sending:
            return ActionResult(BLOCKED, 'Send In Progress', 'Another notification is still being sent. Please wait.')
        return ActionResult(BLOCKED, 'No Subscribers', 'There are no subscribers to notify yet.')

    def send_update(self, title, content):
        """Broadcast an admin-written update to every loaded subscriber"""
        title = (title or '').strip()
        content = (content or '').strip()

        if not self.can_send:
            return self._blocked()

        if not title or not content:
            return ActionResult(MISSING, 'Missing Information',
                                'Please fill in both title and content for the update.')

        if not _send_lock.acquire(blocking=False):
            return self._blocked()

        recipients = [s['email'] for s in self.subscribers]
        try:
            self.service.send_update({'title': title, 'content': content, 'recipients': recipients})
        except Exception as e:
            logger.error(f"Error sending update: {e}")
            db_log('error', 'dashboard', 'Failed to send update', {'title': title, 'error': str(e)})
            return ActionResult(FAILED, 'Error', 'Failed to send update. Please try again.')
        finally:
            _send_lock.release()

        self.refresh()
        return ActionResult(SENT, 'Update Sent! 📧',
                            f'Update "{title}" has been sent to {len(recipients)} subscribers.')

    def send_launch_notification(self):
        """Broadcast the fixed launch announcement"""
        if not self.can_send:
            return self._blocked()

        if not _send_lock.acquire(blocking=False):
            return self._blocked()

        try:
            self.service.send_launch_notification()
        except Exception as e:
            logger.error(f"Error sending launch notification: {e}")
            db_log('error', 'dashboard', 'Failed to send launch notification', {'error': str(e)})
            return ActionResult(FAILED, 'Error', 'Failed to send launch notification. Please try again.')
        finally:
            _send_lock.release()

        self.refresh()
        return ActionResult(SENT, 'Launch Notification Sent! 🚀',
                            f'All subscribers have been notified about the {self.brand_name} launch!')
