"""
Templates Routes
================

Template gallery API: browse public templates, apply one as a new draft
campaign, save a campaign as a personal template.
"""

import logging
from flask import jsonify, request

from ...core.auth import get_current_user, login_required
from ...core.database import PersistenceError, get_record_store
from ...editor.errors import BlockValidationError, SessionNotFoundError
from ...editor.views import get_sessions
from ..campaigns.models import campaign_serializer, init_campaigns_db
from . import templates_bp
from .models import (
    CATEGORIES, apply_template, filter_templates, find_template,
    init_templates_db, list_public_templates, save_template,
)

logger = logging.getLogger(__name__)


@templates_bp.errorhandler(BlockValidationError)
def handle_validation_error(e):
    return jsonify({'error': str(e)}), 400


@templates_bp.errorhandler(SessionNotFoundError)
def handle_session_not_found(e):
    return jsonify({'error': str(e)}), 404


@templates_bp.errorhandler(PersistenceError)
def handle_persistence_error(e):
    logger.error(f"Templates persistence error: {e}")
    return jsonify({'error': str(e)}), 500


@templates_bp.route('/', methods=['GET'])
@login_required
def list_templates():
    """Gallery: ?q=search&category=newsletter"""
    store = get_record_store()
    try:
        init_templates_db()
    except PersistenceError as e:
        logger.warning(f"Templates table unavailable: {e}")
    templates = list_public_templates(store)
    filtered = filter_templates(
        templates,
        request.args.get('q', ''),
        request.args.get('category', 'all'),
    )

    categories = []
    for key, label in CATEGORIES.items():
        count = len(templates) if key == 'all' else len([t for t in templates if t.get('category') == key])
        categories.append({'id': key, 'name': label, 'count': count})

    return jsonify({'templates': filtered, 'categories': categories}), 200


@templates_bp.route('/<template_id>/apply', methods=['POST'])
@login_required
def apply(template_id):
    """Create a draft campaign from a template"""
    user = get_current_user()
    store = get_record_store()
    init_templates_db()
    template = find_template(template_id, store, user)
    if template is None:
        return jsonify({'error': 'Template not found'}), 404

    init_campaigns_db()
    record = apply_template(template, user, store)
    return jsonify({
        'campaign_id': record['id'],
        'name': record.get('name'),
        'message': 'Template applied',
    }), 201


@templates_bp.route('/', methods=['POST'])
@login_required
def create_template():
    """Save a template from an open campaign session or a posted body.

    Body: {"name": ..., "category": ..., "session_id": ...}
       or {"name": ..., "category": ..., "document": {"blocks": [...], "settings": {...}}}
    """
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Template name is required'}), 400

    category = data.get('category') or 'custom'
    if category not in CATEGORIES or category == 'all':
        return jsonify({'error': f'Unknown category: {category}'}), 400

    if data.get('session_id'):
        with get_sessions().edit(data['session_id'], user['id'], 'campaign') as document:
            snapshot = document.copy()
    elif data.get('document') is not None:
        snapshot = campaign_serializer.deserialize(data['document'])
    else:
        return jsonify({'error': 'session_id or document is required'}), 400

    init_templates_db()
    record = save_template(
        name, snapshot, user, get_record_store(),
        category=category,
        thumbnail_url=data.get('thumbnail_url', ''),
        is_public=bool(data.get('is_public')),
    )
    return jsonify({'id': record['id'], 'message': 'Template saved'}), 201
