"""
Centralized logging service for the Mailforge builders.
Provides structured logging with database storage and easy integration.
"""

import json
import sqlite3
import os
from datetime import datetime
from flask import request, has_request_context, session
from .database import Database
from .config import get_config_value


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _log_db_path():
        return get_config_value('LOG_DB')

    @staticmethod
    def _ensure_logs_table():
        """Ensure the app_logs table exists"""
        try:
            db_path = LoggingService._log_db_path()
            db_dir = os.path.dirname(db_path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)
            Database.execute_script(db_path, [
                """
                    CREATE TABLE IF NOT EXISTS app_logs (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        timestamp TEXT NOT NULL,
                        level TEXT NOT NULL,
                        source TEXT NOT NULL,
                        message TEXT NOT NULL,
                        details TEXT,
                        request_path TEXT,
                        user_id TEXT
                    )
                """,
                """
                    CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                    ON app_logs(timestamp DESC)
                """,
                """
                    CREATE INDEX IF NOT EXISTS idx_logs_source
                    ON app_logs(source)
                """,
            ])
        except Exception as e:
            print(f"Failed to ensure logs table: {e}")

    @staticmethod
    def _get_request_context():
        """Extract request path and signed-in user, if any"""
        if not has_request_context():
            return None, None
        try:
            return request.path, session.get('user_id')
        except Exception:
            return None, None

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (campaigns, automations, ...)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        try:
            LoggingService._ensure_logs_table()

            request_path, session_user = LoggingService._get_request_context()
            user_id = user_id or session_user

            if isinstance(details, dict):
                details = json.dumps(details, indent=2, default=str)

            timestamp = datetime.now().isoformat()

            with Database.connect(LoggingService._log_db_path()) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    timestamp, level.upper(), source, message, details,
                    request_path, user_id
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console logging if database fails
            print(f"[{datetime.now().isoformat()}] [{level.upper()}] [{source}] {message}")
            if details:
                print(f"Details: {details}")
            print(f"Logging service error: {e}")

    @staticmethod
    def recent(source=None, limit=50):
        """Most recent log entries, newest first"""
        try:
            with Database.connect(LoggingService._log_db_path()) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                if source:
                    cursor.execute(
                        "SELECT * FROM app_logs WHERE source = ? ORDER BY id DESC LIMIT ?",
                        (source, limit)
                    )
                else:
                    cursor.execute("SELECT * FROM app_logs ORDER BY id DESC LIMIT ?", (limit,))
                return [dict(row) for row in cursor.fetchall()]
        except Exception as e:
            print(f"Failed to read logs: {e}")
            return []


def db_log(level, source, message, details=None):
    """Shortcut used by the modules' _db_log helpers"""
    LoggingService.log(level, source, message, details)
