"""
Landing Pages Models
====================

Database schema and serializer for landing pages. Slug, title and
description are surfaced as columns so a published page can be looked up
by its slug.
"""

import os
import logging

from ...core.config import Config, get_config_value
from ...core.database import Database, PersistenceError
from ...core.logging_service import db_log
from ...editor import DocumentSerializer
from .sections import LandingPageDocument

logger = logging.getLogger(__name__)


def _db_log(level, message, details=None):
    """Log to the persistent DB logger"""
    db_log(level, 'landing_pages', message, details)


def init_landing_pages_db():
    """Create the landing_pages table in BUILDER_DB"""
    try:
        db_path = get_config_value('BUILDER_DB')
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        Database.execute_script(db_path, [
            f'''
                CREATE TABLE IF NOT EXISTS {Config.LANDING_PAGES_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL,
                    title TEXT NOT NULL DEFAULT '',
                    description TEXT NOT NULL DEFAULT '',
                    content TEXT NOT NULL DEFAULT '{{}}',
                    status TEXT DEFAULT 'draft',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''',
            f'''
                CREATE INDEX IF NOT EXISTS idx_landing_pages_slug
                ON {Config.LANDING_PAGES_TABLE}(slug)
            ''',
        ])

    except Exception as e:
        logger.error(f"Error initializing landing pages database: {e}")
        _db_log('error', 'Failed to init landing pages DB', {'error': str(e)})
        raise PersistenceError(f"Could not initialise landing pages table: {e}") from e


class LandingPageSerializer(DocumentSerializer):
    table = Config.LANDING_PAGES_TABLE
    record_prefix = 'page'
    document_class = LandingPageDocument

    def record_fields(self, document):
        settings = document.metadata
        return {
            'name': settings.name,
            'slug': settings.slug,
            'title': settings.title,
            'description': settings.description,
            'status': document.status,
        }


landing_page_serializer = LandingPageSerializer()
