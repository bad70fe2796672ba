"""
Automations Models
==================

Database schema and serializer for automation workflows. Besides the
workflow JSON, a record surfaces its trigger as trigger_type and
trigger_config so automations can be looked up by event.
"""

import json
import os
import logging

from ...core.config import Config, get_config_value
from ...core.database import Database, PersistenceError
from ...core.logging_service import db_log
from ...editor import DocumentSerializer
from .nodes import DEFAULT_TRIGGER_EVENT, AutomationDocument

logger = logging.getLogger(__name__)


def _db_log(level, message, details=None):
    """Log to the persistent DB logger"""
    db_log(level, 'automations', message, details)


def init_automations_db():
    """Create the automations table in BUILDER_DB"""
    try:
        db_path = get_config_value('BUILDER_DB')
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        Database.execute_script(db_path, [
            f'''
                CREATE TABLE IF NOT EXISTS {Config.AUTOMATIONS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    trigger_type TEXT NOT NULL DEFAULT '{DEFAULT_TRIGGER_EVENT}',
                    trigger_config TEXT NOT NULL DEFAULT '{{}}',
                    workflow_data TEXT NOT NULL DEFAULT '{{}}',
                    status TEXT DEFAULT 'draft',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''',
            f'''
                CREATE INDEX IF NOT EXISTS idx_automations_trigger
                ON {Config.AUTOMATIONS_TABLE}(trigger_type, status)
            ''',
        ])

    except Exception as e:
        logger.error(f"Error initializing automations database: {e}")
        _db_log('error', 'Failed to init automations DB', {'error': str(e)})
        raise PersistenceError(f"Could not initialise automations table: {e}") from e


class AutomationSerializer(DocumentSerializer):
    """Automation record: {"nodes": [...], "automation": {...}} in workflow_data"""
    table = Config.AUTOMATIONS_TABLE
    record_prefix = 'automation'
    document_class = AutomationDocument
    blocks_key = 'nodes'
    settings_key = 'automation'
    body_column = 'workflow_data'

    def trigger_fields(self, document):
        """trigger_type / trigger_config from the first trigger node.

        Without a trigger node the type falls back to DEFAULT_TRIGGER_EVENT
        and the config to an empty object.
        """
        trigger = document.trigger()
        if trigger is None:
            return DEFAULT_TRIGGER_EVENT, {}
        config = trigger.content.model_dump(mode='json')
        return config.get('event') or DEFAULT_TRIGGER_EVENT, config

    def record_fields(self, document):
        trigger_type, trigger_config = self.trigger_fields(document)
        return {
            'name': document.metadata.name,
            'trigger_type': trigger_type,
            'trigger_config': json.dumps(trigger_config),
            'status': document.status,
        }


automation_serializer = AutomationSerializer()
