import logging

from flask import current_app, jsonify

from ...core.auth import get_current_user, login_required
from ...core.logging_service import db_log
from . import auth_bp

logger = logging.getLogger(__name__)


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """The signed-in user: {id, email, display_name}"""
    return jsonify({'user': get_current_user()}), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Sign out; open editor sessions of the user are discarded"""
    user = current_app.extensions['mailforge'].auth.sign_out()
    if user is None:
        return jsonify({'success': True, 'message': 'Not signed in'}), 200
    db_log('info', 'auth', 'User signed out', {'user_id': user['id']})
    return jsonify({'success': True, 'message': 'Signed out'}), 200
