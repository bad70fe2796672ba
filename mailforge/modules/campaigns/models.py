"""
Campaigns Models
================

Database schema and serializer for email campaigns.
Tables live in BUILDER_DB next to automations and landing pages.
"""

import os
import logging

from ...core.config import Config, get_config_value
from ...core.database import Database, PersistenceError
from ...core.logging_service import db_log
from ...editor import DocumentSerializer
from .blocks import CampaignDocument

logger = logging.getLogger(__name__)


def _db_log(level, message, details=None):
    """Log to the persistent DB logger"""
    db_log(level, 'campaigns', message, details)


def init_campaigns_db():
    """Create the campaigns table in BUILDER_DB"""
    try:
        db_path = get_config_value('BUILDER_DB')
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        Database.execute_script(db_path, [
            f'''
                CREATE TABLE IF NOT EXISTS {Config.CAMPAIGNS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    subject TEXT NOT NULL DEFAULT '',
                    content TEXT NOT NULL DEFAULT '{{}}',
                    status TEXT DEFAULT 'draft',
                    type TEXT DEFAULT 'regular',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''',
            f'''
                CREATE INDEX IF NOT EXISTS idx_campaigns_user
                ON {Config.CAMPAIGNS_TABLE}(user_id)
            ''',
        ])

    except Exception as e:
        logger.error(f"Error initializing campaigns database: {e}")
        _db_log('error', 'Failed to init campaigns DB', {'error': str(e)})
        raise PersistenceError(f"Could not initialise campaigns table: {e}") from e


class CampaignSerializer(DocumentSerializer):
    """Campaign record: subject as a column, blocks + settings as JSON content"""
    table = Config.CAMPAIGNS_TABLE
    record_prefix = 'campaign'
    document_class = CampaignDocument

    def record_fields(self, document):
        return {
            'name': document.metadata.name,
            'subject': document.metadata.subject,
            'status': document.status,
            'type': 'regular',
        }


campaign_serializer = CampaignSerializer()
