"""
Centralized logging service for the CampusConnect application.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
from datetime import datetime
from flask import request, has_request_context
from .database import Database
from .config import Config

_stdout = logging.getLogger(__name__)


class LoggingService:
    """Centralized logging service for application-wide logging"""

    # Set by CampusConnect.init_app; falls back to Config.DATABASE
    db_path = None

    @classmethod
    def _get_db_path(cls):
        return cls.db_path or Config.DATABASE

    @classmethod
    def _ensure_logs_table(cls):
        """Ensure the app_logs table exists"""
        with Database.connect(cls._get_db_path()) as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.LOGS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT
                )
            """)
            cursor.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                ON {Config.LOGS_TABLE}(timestamp DESC)
            """)
            cursor.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_logs_source
                ON {Config.LOGS_TABLE}(source)
            """)
            conn.commit()

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')[:500]
        return ip_address, user_agent, request.path

    @classmethod
    def log(cls, level, source, message, details=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (waitlist, dashboard, notifications, ...)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
        """
        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        try:
            cls._ensure_logs_table()
            ip_address, user_agent, request_path = cls._get_request_context()

            with Database.connect(cls._get_db_path()) as conn:
                conn.execute(f"""
                    INSERT INTO {Config.LOGS_TABLE}
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level.upper(), source, message,
                    details, ip_address, user_agent, request_path
                ))
                conn.commit()

        except Exception as e:
            # Fall back to the stdout logger if the database write fails
            _stdout.log(getattr(logging, level.upper(), logging.INFO), f"[{source}] {message}")
            if details:
                _stdout.info(f"Details: {details}")
            _stdout.error(f"Logging service error: {e}")

    @classmethod
    def error(cls, source, message, details=None):
        cls.log('ERROR', source, message, details)

    @classmethod
    def log_error_with_traceback(cls, source, error, details=None):
        """Log error with full traceback"""
        import traceback
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        cls.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @classmethod
    def recent(cls, limit=50, source=None):
        """Most recent log entries, newest first"""
        cls._ensure_logs_table()
        query = f"SELECT timestamp, level, source, message, details FROM {Config.LOGS_TABLE}"
        params = []
        if source:
            query += " WHERE source = ?"
            params.append(source)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        with Database.connect(cls._get_db_path()) as conn:
            rows = conn.execute(query, params).fetchall()
        return [
            {'timestamp': r[0], 'level': r[1], 'source': r[2], 'message': r[3], 'details': r[4]}
            for r in rows
        ]


def db_log(level, source, message, details=None):
    """Shortcut used by the modules to write to the persistent log"""
    LoggingService.log(level, source, message, details)

