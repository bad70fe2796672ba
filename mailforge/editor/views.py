"""
Builder API routes
==================

JSON routes shared by the three builders. Each module builds a Builder
(document factory, serializer, renderer) and calls register_builder_routes
on its blueprint. All routes require a signed-in user.
"""
import logging

from flask import current_app, jsonify, request

from ..core.auth import get_current_user, login_required
from ..core.database import PersistenceError, get_record_store
from ..core.logging_service import db_log
from .errors import (
    BlockNotFoundError, BlockValidationError, InvalidConnectionError,
    SavePendingError, SessionNotFoundError, UnknownBlockTypeError,
)
from .rendering import RenderOptions

logger = logging.getLogger(__name__)


class Builder:
    """Everything the shared routes need to know about one builder"""

    def __init__(self, name, new_document, serializer, render, init_db=None):
        self.name = name
        self.new_document = new_document
        self.serializer = serializer
        self.render = render
        self.init_db = init_db

    @property
    def registry(self):
        return self.serializer.document_class.registry

    def block_types(self):
        registry = self.registry
        types = []
        for block_type in registry.types:
            content, style = registry.defaults(block_type)
            types.append({
                'type': block_type,
                'label': registry.labels.get(block_type, block_type.title()),
                'content': content,
                'style': style,
            })
        return types


def get_sessions():
    return current_app.extensions['mailforge'].sessions


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BlockValidationError("Request body must be a JSON object")
    return data


def _render_options(document):
    mode = request.args.get('mode', 'edit')
    if mode not in ('edit', 'preview'):
        raise BlockValidationError(f"Unknown mode: {mode}")
    editing = mode == 'edit'
    return RenderOptions(
        viewport=request.args.get('viewport', 'desktop'),
        editing=editing,
        selected_id=document.selection.selected_id if editing else None,
    )


def register_builder_routes(bp, builder):
    """Attach session, block, selection, render and save routes to bp"""

    def _db_log(level, message, details=None):
        db_log(level, builder.name, message, details)

    def _payload(session):
        data = session.to_dict()
        data['document'] = builder.serializer.serialize(session.document)
        return data

    def _edit(session_id):
        return get_sessions().edit(session_id, get_current_user()['id'], builder.name)

    # ---- errors -------------------------------------------------------

    def _error(status):
        def handler(e):
            return jsonify({'error': str(e)}), status
        return handler

    bp.register_error_handler(SessionNotFoundError, _error(404))
    bp.register_error_handler(BlockNotFoundError, _error(404))
    bp.register_error_handler(UnknownBlockTypeError, _error(400))
    bp.register_error_handler(BlockValidationError, _error(400))
    bp.register_error_handler(InvalidConnectionError, _error(400))
    bp.register_error_handler(SavePendingError, _error(409))

    # ---- catalogue ----------------------------------------------------

    @bp.route('/block-types')
    @login_required
    def block_types():
        """Block palette with default content/style per type"""
        return jsonify({'block_types': builder.block_types()}), 200

    @bp.route('/', methods=['GET'])
    @login_required
    def list_records():
        """Saved records of the signed-in user, newest first"""
        user = get_current_user()
        try:
            if builder.init_db:
                builder.init_db()
            records = get_record_store().list_records(
                builder.serializer.table,
                where={'user_id': user['id']},
                order_by=('created_at', 'desc'),
            )
            return jsonify({builder.serializer.table: records}), 200
        except PersistenceError as e:
            logger.error(f"Error listing {builder.serializer.table}: {e}")
            _db_log('error', f'Error listing {builder.serializer.table}', {'error': str(e)})
            return jsonify({'error': str(e)}), 500

    # ---- sessions -----------------------------------------------------

    @bp.route('/sessions', methods=['POST'])
    @login_required
    def open_session():
        """Open an editor on a new document, or on a saved record (record_id)"""
        user = get_current_user()
        data = _json_body()
        record_id = data.get('record_id')

        if record_id:
            try:
                if builder.init_db:
                    builder.init_db()
                record = get_record_store().get_record(builder.serializer.table, record_id)
            except PersistenceError as e:
                logger.error(f"Error loading {builder.name} {record_id}: {e}")
                _db_log('error', f'Error loading {record_id}', {'error': str(e)})
                return jsonify({'error': str(e)}), 500
            if not record or str(record.get('user_id')) != user['id']:
                return jsonify({'error': f'{builder.name} record not found'}), 404
            document = builder.serializer.from_record(record)
        else:
            document = builder.new_document()

        session = get_sessions().open(builder.name, document, user['id'])
        return jsonify(_payload(session)), 201

    @bp.route('/sessions/<session_id>', methods=['GET'])
    @login_required
    def get_session(session_id):
        session = get_sessions().get(session_id, get_current_user()['id'], builder.name)
        return jsonify(_payload(session)), 200

    @bp.route('/sessions/<session_id>', methods=['DELETE'])
    @login_required
    def discard_session(session_id):
        """Close the editor without saving"""
        sessions = get_sessions()
        sessions.get(session_id, get_current_user()['id'], builder.name)
        sessions.discard(session_id)
        return jsonify({'message': 'Session discarded'}), 200

    # ---- blocks -------------------------------------------------------

    @bp.route('/sessions/<session_id>/blocks', methods=['POST'])
    @login_required
    def add_block(session_id):
        data = _json_body()
        block_type = data.get('type')
        if not block_type:
            return jsonify({'error': 'Block type is required'}), 400
        with _edit(session_id) as document:
            block_id = document.add_block(block_type, data.get('position'))
            block = document.blocks.get(block_id)
            selected_id = document.selection.selected_id
        return jsonify({
            'id': block_id,
            'block': builder.registry.encode(block),
            'selected_id': selected_id,
        }), 201

    @bp.route('/sessions/<session_id>/blocks/<block_id>', methods=['PATCH'])
    @login_required
    def update_block(session_id, block_id):
        """Partial update: {"content": {...}, "style": {...}, ...other fields}"""
        data = _json_body()
        content = data.pop('content', None)
        style = data.pop('style', None)
        with _edit(session_id) as document:
            block = document.update_block(block_id, content=content, style=style, **data)
        return jsonify({'block': builder.registry.encode(block)}), 200

    @bp.route('/sessions/<session_id>/blocks/<block_id>', methods=['DELETE'])
    @login_required
    def delete_block(session_id, block_id):
        with _edit(session_id) as document:
            document.delete_block(block_id)
            selected_id = document.selection.selected_id
        return jsonify({'deleted': block_id, 'selected_id': selected_id}), 200

    @bp.route('/sessions/<session_id>/blocks/<block_id>/move', methods=['POST'])
    @login_required
    def move_block(session_id, block_id):
        data = _json_body()
        with _edit(session_id) as document:
            document.move_block(block_id, data.get('index'))
            order = document.blocks.ids
        return jsonify({'order': order}), 200

    @bp.route('/sessions/<session_id>/blocks/<block_id>/inline', methods=['POST'])
    @login_required
    def inline_edit(session_id, block_id):
        """Text edited in place on the rendered surface (sent on blur)"""
        data = _json_body()
        if 'value' not in data:
            return jsonify({'error': 'value is required'}), 400
        with _edit(session_id) as document:
            block = document.commit_inline_text(block_id, data['value'], data.get('field', 'text'))
        return jsonify({'block': builder.registry.encode(block)}), 200

    # ---- selection / metadata / status ----------------------------------

    @bp.route('/sessions/<session_id>/selection', methods=['PUT'])
    @login_required
    def select(session_id):
        """{"block_id": id} selects; null clears (click on empty canvas)"""
        data = _json_body()
        with _edit(session_id) as document:
            selected_id = document.select(data.get('block_id'))
        return jsonify({'selected_id': selected_id}), 200

    @bp.route('/sessions/<session_id>/metadata', methods=['PATCH'])
    @login_required
    def update_metadata(session_id):
        data = _json_body()
        with _edit(session_id) as document:
            metadata = document.update_metadata(**data)
        return jsonify({'metadata': metadata.model_dump(mode='json')}), 200

    @bp.route('/sessions/<session_id>/status', methods=['PUT'])
    @login_required
    def set_status(session_id):
        data = _json_body()
        with _edit(session_id) as document:
            status = document.set_status(data.get('status'))
        return jsonify({'status': status}), 200

    # ---- rendering ----------------------------------------------------

    @bp.route('/sessions/<session_id>/render', methods=['GET'])
    @login_required
    def render(session_id):
        """HTML for the canvas. ?viewport=desktop|mobile&mode=edit|preview"""
        with _edit(session_id) as document:
            try:
                options = _render_options(document)
            except ValueError as e:
                return jsonify({'error': str(e)}), 400
            html = builder.render(document, options)
        return jsonify({'html': html}), 200

    @bp.route('/preview', methods=['POST'])
    @login_required
    def preview():
        """Render a posted document body without opening a session"""
        data = _json_body()
        try:
            document = builder.serializer.deserialize(data.get('document') or {})
            options = RenderOptions(viewport=data.get('viewport', 'desktop'))
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        return jsonify({'html': builder.render(document, options)}), 200

    # ---- save ---------------------------------------------------------

    @bp.route('/sessions/<session_id>/save', methods=['POST'])
    @login_required
    def save(session_id):
        """Persist a snapshot of the document. No retry: the user saves again."""
        user = get_current_user()
        sessions = get_sessions()
        snapshot = sessions.begin_save(session_id, user['id'], builder.name)
        try:
            if builder.init_db:
                builder.init_db()
            record = builder.serializer.save(snapshot, user, get_record_store())
            record_id = record['id']
        except Exception as e:
            sessions.finish_save(session_id, error=str(e) or type(e).__name__)
            logger.error(f"Error saving {builder.name}: {e!r}")
            _db_log('error', f'Error saving {builder.name}', {'error': repr(e), 'session': session_id})
            return jsonify({'error': f'Error saving {builder.name}: {e}'}), 500

        sessions.finish_save(session_id, record_id=record_id)
        logger.info(f"{builder.name} saved: {record_id}")
        _db_log('info', f'{builder.name} saved', {'id': record_id, 'name': record.get('name')})
        return jsonify({'id': record_id, 'message': f'{builder.name.title()} saved'}), 200

    return bp
