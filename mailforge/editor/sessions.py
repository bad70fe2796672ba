"""
Editor sessions
===============

Server-held builder state: each session owns one Document for one user.
Edits are applied under the store lock one at a time. A save works on a
snapshot taken under the lock, so editing can continue while the record
store call is in flight; a second save for the same session is refused
until the first one finishes.
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

from ..core.auth import SIGNED_OUT
from .errors import SavePendingError, SessionNotFoundError

logger = logging.getLogger(__name__)


class EditorSession:
    def __init__(self, session_id, builder, document, owner_id):
        self.id = session_id
        self.builder = builder
        self.document = document
        self.owner_id = owner_id
        self.saving = False
        self.last_saved_at = None
        self.last_error = None
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self):
        return {
            'session_id': self.id,
            'builder': self.builder,
            'record_id': self.document.record_id,
            'status': self.document.status,
            'selected_id': self.document.selection.selected_id,
            'saving': self.saving,
            'last_saved_at': self.last_saved_at.isoformat() if self.last_saved_at else None,
            'last_error': self.last_error,
        }


class EditorSessionStore:
    """All open editor sessions of the process.

    When given an AuthContext it subscribes to it and drops a user's
    sessions on sign-out; close() releases that subscription.
    """

    def __init__(self, auth_context=None):
        self._lock = threading.RLock()
        self._sessions = {}
        self._subscription = None
        if auth_context is not None:
            self._subscription = auth_context.subscribe(self._on_auth_event)

    def __len__(self):
        return len(self._sessions)

    def open(self, builder, document, owner_id):
        session = EditorSession(uuid.uuid4().hex, builder, document, str(owner_id))
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Opened {builder} editor session {session.id} for user {owner_id}")
        return session

    def get(self, session_id, owner_id=None, builder=None):
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if owner_id is not None and session.owner_id != str(owner_id):
            raise SessionNotFoundError(session_id)
        if builder is not None and session.builder != builder:
            raise SessionNotFoundError(session_id)
        return session

    @contextmanager
    def edit(self, session_id, owner_id=None, builder=None):
        """Yield the session's document with the store lock held"""
        with self._lock:
            session = self.get(session_id, owner_id, builder)
            yield session.document

    def discard(self, session_id):
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info(f"Discarded editor session {session_id}")
        return session

    def sessions_for(self, owner_id):
        with self._lock:
            return [s for s in self._sessions.values() if s.owner_id == str(owner_id)]

    # ---- saving -------------------------------------------------------

    def begin_save(self, session_id, owner_id=None, builder=None):
        """Mark a save as pending and return a snapshot of the document"""
        with self._lock:
            session = self.get(session_id, owner_id, builder)
            if session.saving:
                raise SavePendingError(f"A save is already in progress for session {session_id}")
            session.saving = True
            return session.document.copy()

    def finish_save(self, session_id, record_id=None, error=None):
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.saving = False
            if error:
                session.last_error = error
            else:
                session.last_error = None
                session.last_saved_at = datetime.now(timezone.utc)
                if record_id:
                    session.document.record_id = record_id
            return session

    # ---- lifecycle ----------------------------------------------------

    def _on_auth_event(self, event, user):
        if event != SIGNED_OUT or not user:
            return
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if s.owner_id == str(user['id'])]
            for sid in stale:
                del self._sessions[sid]
        if stale:
            logger.info(f"Discarded {len(stale)} editor session(s) for signed-out user {user['id']}")

    def close(self):
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        with self._lock:
            self._sessions.clear()
