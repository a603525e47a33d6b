import os
import sqlite3
import logging
from .config import Config

logger = logging.getLogger(__name__)


class Database:
    """SQLite connection and schema helpers for the local storage backend."""

    @staticmethod
    def connect(path):
        return sqlite3.connect(path)

    @staticmethod
    def ensure_dir(path):
        """Create the parent directory of a database file if needed"""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    @classmethod
    def init_schema(cls, path):
        """
        Create the subscriber and notification tables if they don't exist.
        Email uniqueness lives in the table definition so duplicate inserts
        surface as sqlite3.IntegrityError.
        """
        cls.ensure_dir(path)
        with cls.connect(path) as conn:
            cursor = conn.cursor()

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.SUBSCRIBERS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    first_name TEXT NOT NULL,
                    is_active BOOLEAN DEFAULT TRUE,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.NOTIFICATIONS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    type TEXT NOT NULL,
                    title TEXT,
                    content TEXT,
                    recipient_email TEXT,
                    success BOOLEAN DEFAULT TRUE,
                    timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute(f'''
                CREATE INDEX IF NOT EXISTS idx_subscribers_active
                ON {Config.SUBSCRIBERS_TABLE}(is_active, created_at)
            ''')
            cursor.execute(f'''
                CREATE INDEX IF NOT EXISTS idx_notifications_type
                ON {Config.NOTIFICATIONS_TABLE}(type)
            ''')

            conn.commit()
            logger.info("Waitlist database tables created/verified successfully")

    @classmethod
    def check(cls, path):
        """Return (ok, detail) for the health endpoint"""
        try:
            with cls.connect(path) as conn:
                conn.execute("SELECT 1").fetchone()
            return True, 'ok'
        except sqlite3.Error as e:
            return False, str(e)
