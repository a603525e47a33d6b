"""
Supabase Storage Backend
========================

Reads and writes the waitlist tables through Supabase's PostgREST API.
Requires SUPABASE_URL and a SUPABASE_KEY with insert/select rights on
email_subscribers and notifications_sent.
"""

import logging
import requests

from campusconnect.core.config import Config
from .errors import ServiceError, DuplicateSubscriberError
from .models import subscriber_from_row

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = '23505'


class SupabaseStore:
    """PostgREST implementation of the data service's read/write API"""

    def __init__(self, url, key, timeout=15):
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend")
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.key = key
        self.timeout = timeout

    def init(self):
        # Tables are managed in the Supabase project, nothing to create here
        logger.info(f"Using Supabase backend at {self.base_url}")

    def _headers(self, prefer=None):
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(self, method, table, prefer=None, **kwargs):
        try:
            return requests.request(
                method,
                f"{self.base_url}/{table}",
                headers=self._headers(prefer),
                timeout=self.timeout,
                **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise ServiceError(f"Supabase request failed: {e}") from e

    @staticmethod
    def _error_code(resp):
        """Postgres error code from a failed PostgREST response, if any"""
        if resp.ok:
            return None
        try:
            body = resp.json()
        except ValueError:
            return None
        return body.get('code') if isinstance(body, dict) else None

    def _raise_for_status(self, resp, action):
        if resp.ok:
            return
        logger.error(f"Supabase error while {action}: {resp.status_code} {resp.text}")
        raise ServiceError(f"Supabase error while {action}: HTTP {resp.status_code}")

    def insert_subscriber(self, record):
        resp = self._request(
            'POST', Config.SUBSCRIBERS_TABLE,
            prefer='return=representation',
            json=[{
                'email': record['email'],
                'first_name': record['first_name'],
                'is_active': record.get('is_active', True),
            }]
        )
        if resp.status_code == 409 or self._error_code(resp) == UNIQUE_VIOLATION:
            raise DuplicateSubscriberError(record['email'])
        self._raise_for_status(resp, 'inserting subscriber')

        rows = resp.json() or [record]
        if isinstance(rows, dict):
            rows = [rows]
        return subscriber_from_row(rows[0])

    def insert_notification(self, record):
        resp = self._request(
            'POST', Config.NOTIFICATIONS_TABLE,
            prefer='return=minimal',
            json=[{
                'type': record['type'],
                'title': record.get('title'),
                'content': record.get('content'),
                'recipient_email': record.get('recipient_email'),
                'success': record.get('success', True),
            }]
        )
        self._raise_for_status(resp, 'recording notification')

    def list_subscribers(self):
        resp = self._request(
            'GET', Config.SUBSCRIBERS_TABLE,
            params={
                'select': 'email,first_name,is_active,created_at',
                'is_active': 'eq.true',
                'order': 'created_at.desc',
            }
        )
        self._raise_for_status(resp, 'listing subscribers')
        return [subscriber_from_row(row) for row in resp.json()]

    def list_notifications(self, limit=20):
        resp = self._request(
            'GET', Config.NOTIFICATIONS_TABLE,
            params={
                'select': 'type,title,content,recipient_email,success,timestamp',
                'order': 'timestamp.desc',
                'limit': str(limit),
            }
        )
        self._raise_for_status(resp, 'listing notifications')
        return resp.json()

    def count_active_subscribers(self):
        return self._count(Config.SUBSCRIBERS_TABLE, {'select': 'email', 'is_active': 'eq.true'})

    def count_notifications(self):
        return self._count(Config.NOTIFICATIONS_TABLE, {'select': 'type'})

    def check(self):
        try:
            self._count(Config.SUBSCRIBERS_TABLE, {'select': 'email'})
            return True, 'ok'
        except ServiceError as e:
            return False, str(e)

    def _count(self, table, params):
        """Exact row count from the Content-Range header (e.g. '0-24/57' or '*/0')"""
        resp = self._request('HEAD', table, prefer='count=exact', params=params)
        self._raise_for_status(resp, f'counting {table}')

        content_range = resp.headers.get('Content-Range', '')
        total = content_range.rsplit('/', 1)[-1]
        if not total.isdigit():
            raise ServiceError(f"Unexpected Content-Range from Supabase: {content_range!r}")
        return int(total)
