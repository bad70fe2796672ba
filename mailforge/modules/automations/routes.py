"""
Automations Routes
==================

Automation builder API. On top of the shared builder routes, nodes can be
connected and disconnected, and the workflow activated.
"""

import logging
from flask import jsonify, request

from ...core.auth import get_current_user, login_required
from ...core.logging_service import db_log
from ...editor.views import Builder, get_sessions, register_builder_routes
from . import automations_bp
from .models import automation_serializer, init_automations_db
from .nodes import TRIGGER_EVENTS, new_automation_document
from .renderer import render_workflow

logger = logging.getLogger(__name__)

automation_builder = Builder(
    'automation',
    new_document=new_automation_document,
    serializer=automation_serializer,
    render=render_workflow,
    init_db=init_automations_db,
)

register_builder_routes(automations_bp, automation_builder)


def _edges_json(document):
    return [{'from': src, 'to': dst} for src, dst in document.nodes.edges]


def _edge_ends():
    data = request.get_json(silent=True) or {}
    return data.get('from'), data.get('to')


@automations_bp.route('/trigger-events')
@login_required
def trigger_events():
    """Events a trigger node can listen for"""
    events = [{'value': key, 'label': label} for key, label in TRIGGER_EVENTS.items()]
    return jsonify({'events': events}), 200


@automations_bp.route('/sessions/<session_id>/connections', methods=['POST'])
@login_required
def connect(session_id):
    """Add an edge {"from": node_id, "to": node_id}"""
    from_id, to_id = _edge_ends()
    if not from_id or not to_id:
        return jsonify({'error': 'Both "from" and "to" are required'}), 400

    with get_sessions().edit(session_id, get_current_user()['id'], 'automation') as document:
        created = document.connect(from_id, to_id)
        edges = _edges_json(document)
    return jsonify({'created': created, 'edges': edges}), 201 if created else 200


@automations_bp.route('/sessions/<session_id>/connections', methods=['DELETE'])
@login_required
def disconnect(session_id):
    """Remove an edge {"from": node_id, "to": node_id}"""
    from_id, to_id = _edge_ends()
    with get_sessions().edit(session_id, get_current_user()['id'], 'automation') as document:
        removed = document.disconnect(from_id, to_id)
        edges = _edges_json(document)
    if not removed:
        return jsonify({'error': 'Connection not found', 'edges': edges}), 404
    return jsonify({'removed': True, 'edges': edges}), 200


@automations_bp.route('/sessions/<session_id>/activate', methods=['POST'])
@login_required
def activate(session_id):
    """Mark the workflow active. A workflow needs a trigger node to run."""
    with get_sessions().edit(session_id, get_current_user()['id'], 'automation') as document:
        if document.trigger() is None:
            return jsonify({'error': 'Add a trigger before activating this automation'}), 400
        document.set_status('active')
        name = document.metadata.name
    logger.info(f"Automation session {session_id} activated")
    db_log('info', 'automations', 'Automation activated', {'session': session_id, 'name': name})
    return jsonify({'status': 'active'}), 200
