"""
CampusConnect Core
==================

Configuration, database and logging shared by the modules.
"""

from .config import Config
from .database import Database
from .logging_service import LoggingService, db_log

__all__ = ['Config', 'Database', 'LoggingService', 'db_log']
