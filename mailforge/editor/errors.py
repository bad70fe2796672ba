"""Errors raised by the editor model."""


class EditorError(Exception):
    """Base class for editor model errors"""


class BlockNotFoundError(EditorError):
    def __init__(self, block_id):
        super().__init__(f"Block not found: {block_id}")
        self.block_id = block_id


class UnknownBlockTypeError(EditorError):
    def __init__(self, block_type, registry=None):
        where = f" in {registry}" if registry else ""
        super().__init__(f"Unknown block type{where}: {block_type}")
        self.block_type = block_type


class BlockValidationError(EditorError):
    """A block or payload failed validation; the document is unchanged"""


class InvalidConnectionError(EditorError):
    """A workflow edge that the graph refuses (e.g. a self-loop)"""


class SessionNotFoundError(EditorError):
    def __init__(self, session_id):
        super().__init__(f"Editor session not found: {session_id}")
        self.session_id = session_id


class SavePendingError(EditorError):
    """A save for this editor session is already in flight"""
