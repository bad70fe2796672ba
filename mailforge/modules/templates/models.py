"""
Templates Models
================

Template gallery: public templates from the record store (falling back to
the built-in samples), search/category filtering, applying a template as
a new draft campaign, and saving a campaign body as a user template.

Template content is a campaign document body, so an applied template
opens in the campaign builder like any saved campaign.
"""

import os
import uuid
import logging
from datetime import datetime

from ...core.config import Config, get_config_value
from ...core.database import Database, PersistenceError
from ...core.logging_service import db_log
from ..campaigns.blocks import TextBlock, TextContent, TextStyle, CampaignDocument
from ..campaigns.models import campaign_serializer

logger = logging.getLogger(__name__)

CATEGORIES = {
    'all': 'All Templates',
    'newsletter': 'Newsletter',
    'promotional': 'Promotional',
    'ecommerce': 'E-commerce',
    'event': 'Event',
    'welcome': 'Welcome',
    'custom': 'My Templates',
}

_SAMPLES = [
    ('1', 'Modern Newsletter', 'newsletter', 'photo-1557804506-669a67965ba0'),
    ('2', 'Product Launch', 'promotional', 'photo-1460925895917-afdab827c52f'),
    ('3', 'Welcome Series', 'welcome', 'photo-1516321318423-f06f85e504b3'),
    ('4', 'Flash Sale', 'ecommerce', 'photo-1556742049-0cfed4f6a45d'),
    ('5', 'Event Invitation', 'event', 'photo-1511578314322-379afb476865'),
    ('6', 'Minimalist Newsletter', 'newsletter', 'photo-1586953208448-b95a79798f07'),
]


def _db_log(level, message, details=None):
    """Log to the persistent DB logger"""
    db_log(level, 'templates', message, details)


def init_templates_db():
    """Create the templates table in BUILDER_DB"""
    try:
        db_path = get_config_value('BUILDER_DB')
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        Database.execute_script(db_path, [
            f'''
                CREATE TABLE IF NOT EXISTS {Config.TEMPLATES_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL DEFAULT 'custom',
                    thumbnail_url TEXT DEFAULT '',
                    content TEXT NOT NULL DEFAULT '{{}}',
                    is_public INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''',
            f'''
                CREATE INDEX IF NOT EXISTS idx_templates_public
                ON {Config.TEMPLATES_TABLE}(is_public, created_at)
            ''',
        ])

    except Exception as e:
        logger.error(f"Error initializing templates database: {e}")
        _db_log('error', 'Failed to init templates DB', {'error': str(e)})
        raise PersistenceError(f"Could not initialise templates table: {e}") from e


def _sample_content(name):
    document = CampaignDocument(metadata={'name': name})
    document.blocks.append(TextBlock(
        id=document.blocks.id_factory(),
        content=TextContent(text=name),
        style=TextStyle(font_size='24px', font_weight='bold', text_align='center'),
    ))
    return campaign_serializer.dumps(document)


def sample_templates():
    """Built-in public templates shown when the gallery is empty"""
    now = datetime.now().isoformat()
    return [
        {
            'id': template_id,
            'name': name,
            'category': category,
            'thumbnail_url': f'https://images.unsplash.com/{photo}?w=400&h=300&fit=crop',
            'content': _sample_content(name),
            'is_public': True,
            'created_at': now,
            'user_id': 'system',
        }
        for template_id, name, category, photo in _SAMPLES
    ]


def list_public_templates(store):
    """Public templates, newest first; the samples when there are none"""
    try:
        templates = store.list_records(
            Config.TEMPLATES_TABLE,
            where={'is_public': 1},
            order_by=('created_at', 'desc'),
        )
    except PersistenceError as e:
        logger.warning(f"Could not load templates, using samples: {e}")
        _db_log('warning', 'Template lookup failed, using samples', {'error': str(e)})
        return sample_templates()
    return templates or sample_templates()


def filter_templates(templates, query='', category='all'):
    """Case-insensitive name search plus category ('all' matches every template)"""
    query = (query or '').lower()
    category = category or 'all'
    return [
        template for template in templates
        if query in (template.get('name') or '').lower()
        and (category == 'all' or template.get('category') == category)
    ]


def find_template(template_id, store, user=None):
    """A sample, a public template, or one of user's own; None otherwise"""
    for template in sample_templates():
        if template['id'] == template_id:
            return template
    record = store.get_record(Config.TEMPLATES_TABLE, template_id)
    if not record:
        return None
    if record.get('is_public') or (user and str(record.get('user_id')) == user['id']):
        return record
    return None


def apply_template(template, user, store):
    """Create a draft campaign from template; returns the campaign record"""
    name = template['name']
    document = campaign_serializer.loads(template.get('content'))
    document.update_metadata(name=f"{name} - Copy", subject=f"New campaign from {name}")
    document.set_status('draft')

    record = campaign_serializer.save(document, user, store)
    logger.info(f"Template {template['id']} applied as campaign {record['id']}")
    _db_log('info', 'Template applied', {'template': template['id'], 'campaign': record['id']})
    return record


def save_template(name, document, user, store, category='custom', thumbnail_url='', is_public=False):
    """Store a campaign document as a template owned by user"""
    record = {
        'id': f"template_{uuid.uuid4().hex}",
        'user_id': user['id'],
        'name': name,
        'category': category,
        'thumbnail_url': thumbnail_url or '',
        'content': campaign_serializer.dumps(document),
        'is_public': 1 if is_public else 0,
    }
    saved = store.create_record(Config.TEMPLATES_TABLE, record)
    logger.info(f"Template saved: {record['id']}")
    _db_log('info', 'Template saved', {'id': record['id'], 'name': name})
    return saved or record
