"""
Landing Pages Routes
====================

Landing page builder API. Besides the shared builder routes, a page can
be published under its slug.
"""

import logging
from flask import jsonify

from ...core.auth import get_current_user, login_required
from ...core.logging_service import db_log
from ...editor.views import Builder, get_sessions, register_builder_routes
from . import landing_pages_bp
from .models import init_landing_pages_db, landing_page_serializer
from .renderer import render_landing_page
from .sections import new_landing_page_document

logger = logging.getLogger(__name__)

landing_page_builder = Builder(
    'landing_page',
    new_document=new_landing_page_document,
    serializer=landing_page_serializer,
    render=render_landing_page,
    init_db=init_landing_pages_db,
)

register_builder_routes(landing_pages_bp, landing_page_builder)


@landing_pages_bp.route('/sessions/<session_id>/publish', methods=['POST'])
@login_required
def publish(session_id):
    """Mark the page published. An empty page cannot be published."""
    with get_sessions().edit(session_id, get_current_user()['id'], 'landing_page') as document:
        if len(document.blocks) == 0:
            return jsonify({'error': 'Add at least one section before publishing'}), 400
        document.set_status('published')
        slug = document.metadata.slug
    logger.info(f"Landing page session {session_id} published as /{slug}")
    db_log('info', 'landing_pages', 'Landing page published', {'session': session_id, 'slug': slug})
    return jsonify({'status': 'published', 'slug': slug}), 200
