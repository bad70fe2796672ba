"""
Mailforge Core
==============

Core utilities shared by the builder modules.
"""

from .config import Config, get_config_value
from .database import Database, PersistenceError, RecordStore, get_record_store
from .logging_service import LoggingService, db_log
from .auth import AuthContext, NotAuthenticatedError, get_current_user, login_required

__all__ = [
    'Config', 'get_config_value',
    'Database', 'PersistenceError', 'RecordStore', 'get_record_store',
    'LoggingService', 'db_log',
    'AuthContext', 'NotAuthenticatedError', 'get_current_user', 'login_required',
]
