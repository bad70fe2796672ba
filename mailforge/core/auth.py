"""
Authentication Context
======================

One AuthContext is created per application by the Mailforge extension.
Components that care about sign-in / sign-out register a callback with
subscribe() and keep the returned Subscription until they are torn down.

The current user for a request comes from the Flask session
(user_id, user_email, user_name), set by the host application's login flow.
"""

import logging
import threading
from functools import wraps

from flask import jsonify, session

logger = logging.getLogger(__name__)

SIGNED_IN = 'signed_in'
SIGNED_OUT = 'signed_out'


class NotAuthenticatedError(Exception):
    """Raised when an operation needs a signed-in user and there is none"""


def get_current_user():
    """Return {id, email, display_name} for the signed-in user"""
    user_id = session.get('user_id')
    if not user_id:
        raise NotAuthenticatedError("No active session")
    return {
        'id': str(user_id),
        'email': session.get('user_email', ''),
        'display_name': session.get('user_name'),
    }


def login_required(f):
    """Decorator to require authentication on JSON API routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


class Subscription:
    """Registration handle returned by AuthContext.subscribe"""

    def __init__(self, context, callback):
        self._context = context
        self._callback = callback
        self.active = True

    def release(self):
        if self.active:
            self._context._remove(self._callback)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class AuthContext:
    """Process-wide authentication state with subscribe/unsubscribe"""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners = []

    @property
    def state(self):
        """Signed-in user of the current request, or None"""
        try:
            return get_current_user()
        except (NotAuthenticatedError, RuntimeError):
            return None

    @property
    def listener_count(self):
        return len(self._listeners)

    def subscribe(self, callback):
        """Register callback(event, user); returns a Subscription handle"""
        with self._lock:
            self._listeners.append(callback)
        return Subscription(self, callback)

    def _remove(self, callback):
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _notify(self, event, user):
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback(event, user)
            except Exception as e:
                logger.error(f"Auth listener failed on {event}: {e}")

    def sign_in(self, user):
        """Store the user in the session and notify subscribers"""
        session['user_id'] = str(user['id'])
        session['user_email'] = user.get('email', '')
        session['user_name'] = user.get('display_name')
        logger.info(f"User {user['id']} signed in")
        self._notify(SIGNED_IN, get_current_user())

    def sign_out(self):
        """Clear the session user and notify subscribers"""
        try:
            user = get_current_user()
        except NotAuthenticatedError:
            return None
        for key in ('user_id', 'user_email', 'user_name'):
            session.pop(key, None)
        logger.info(f"User {user['id']} signed out")
        self._notify(SIGNED_OUT, user)
        return user
