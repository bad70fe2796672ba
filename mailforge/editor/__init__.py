"""
Mailforge Editor
================

The block/document editor model shared by the campaign, automation and
landing page builders: registry, collection, selection cursor, rendering
helpers, serializer and server-held editor sessions.
"""

from .blocks import Block, EmptyPayload, Node, Payload, Position, new_block_id
from .registry import BlockRegistry
from .document import BlockCollection, Document, PositionedDocument, SelectionCursor
from .graph import WorkflowDocument, WorkflowGraph
from .serializer import DocumentSerializer
from .sessions import EditorSession, EditorSessionStore
from .errors import (
    BlockNotFoundError, BlockValidationError, EditorError, InvalidConnectionError,
    SavePendingError, SessionNotFoundError, UnknownBlockTypeError,
)

__all__ = [
    'Block', 'EmptyPayload', 'Node', 'Payload', 'Position', 'new_block_id',
    'BlockRegistry',
    'BlockCollection', 'Document', 'PositionedDocument', 'SelectionCursor',
    'WorkflowDocument', 'WorkflowGraph',
    'DocumentSerializer',
    'EditorSession', 'EditorSessionStore',
    'BlockNotFoundError', 'BlockValidationError', 'EditorError', 'InvalidConnectionError',
    'SavePendingError', 'SessionNotFoundError', 'UnknownBlockTypeError',
]
