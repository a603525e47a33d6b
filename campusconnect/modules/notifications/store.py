"""
SQLite storage backend for subscribers and the notification log.
Tables live in the DATABASE file created by Database.init_schema.
"""

import sqlite3
import logging

from campusconnect.core.config import Config
from campusconnect.core.database import Database
from .errors import ServiceError, DuplicateSubscriberError
from .models import subscriber_from_row

logger = logging.getLogger(__name__)


class SQLiteStore:
    """Local-file implementation of the data service's read/write API"""

    def __init__(self, db_path):
        self.db_path = db_path

    def init(self):
        Database.init_schema(self.db_path)

    def insert_subscriber(self, record):
        """Insert one subscriber row and return it as stored"""
        try:
            with Database.connect(self.db_path) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute(f'''
                    INSERT INTO {Config.SUBSCRIBERS_TABLE} (email, first_name, is_active)
                    VALUES (?, ?, ?)
                ''', (record['email'], record['first_name'], record.get('is_active', True)))
                cursor.execute(
                    f'SELECT email, first_name, is_active, created_at FROM {Config.SUBSCRIBERS_TABLE} WHERE id = ?',
                    (cursor.lastrowid,)
                )
                row = cursor.fetchone()
                conn.commit()
                return subscriber_from_row(row)
        except sqlite3.IntegrityError as e:
            if 'UNIQUE' in str(e).upper():
                raise DuplicateSubscriberError(record['email']) from e
            raise ServiceError(f"Invalid subscriber record: {e}") from e
        except sqlite3.Error as e:
            logger.error(f"Database error inserting subscriber: {e}")
            raise ServiceError(f"Database error: {e}") from e

    def insert_notification(self, record):
        """Append one row to the notification log"""
        try:
            with Database.connect(self.db_path) as conn:
                conn.execute(f'''
                    INSERT INTO {Config.NOTIFICATIONS_TABLE}
                    (type, title, content, recipient_email, success)
                    VALUES (?, ?, ?, ?, ?)
                ''', (
                    record['type'], record.get('title'), record.get('content'),
                    record.get('recipient_email'), record.get('success', True)
                ))
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Database error recording notification: {e}")
            raise ServiceError(f"Database error: {e}") from e

    def list_subscribers(self):
        """All active subscribers, newest first"""
        try:
            with Database.connect(self.db_path) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute(f'''
                    SELECT email, first_name, is_active, created_at
                    FROM {Config.SUBSCRIBERS_TABLE}
                    WHERE is_active = TRUE
                    ORDER BY created_at DESC, id DESC
                ''')
                return [subscriber_from_row(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"Database error listing subscribers: {e}")
            raise ServiceError(f"Database error: {e}") from e

    def count_active_subscribers(self):
        return self._count(f'SELECT COUNT(*) FROM {Config.SUBSCRIBERS_TABLE} WHERE is_active = TRUE')

    def count_notifications(self):
        return self._count(f'SELECT COUNT(*) FROM {Config.NOTIFICATIONS_TABLE}')

    def list_notifications(self, limit=20):
        """Most recent notification log rows"""
        try:
            with Database.connect(self.db_path) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute(f'''
                    SELECT type, title, content, recipient_email, success, timestamp
                    FROM {Config.NOTIFICATIONS_TABLE}
                    ORDER BY id DESC LIMIT ?
                ''', (limit,))
                rows = [dict(row) for row in cursor.fetchall()]
                for row in rows:
                    row['success'] = bool(row['success'])
                return rows
        except sqlite3.Error as e:
            logger.error(f"Database error listing notifications: {e}")
            raise ServiceError(f"Database error: {e}") from e

    def check(self):
        return Database.check(self.db_path)

    def _count(self, query):
        try:
            with Database.connect(self.db_path) as conn:
                return conn.execute(query).fetchone()[0]
        except sqlite3.Error as e:
            logger.error(f"Database error counting rows: {e}")
            raise ServiceError(f"Database error: {e}") from e
