"""
Document model
==============

A Document is the in-memory state of one builder session: metadata, an
ordered collection of blocks, a single-selection cursor and a status.
All mutations replace whole blocks, so a rejected edit never leaves a
block half-updated.
"""
import logging

from pydantic import BaseModel, ValidationError

from .blocks import Position, new_block_id
from .errors import BlockNotFoundError, BlockValidationError

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = ('id', 'type')


class BlockCollection:
    """Ordered blocks keyed by id"""

    def __init__(self, registry, blocks=None, id_factory=None):
        self.registry = registry
        self.id_factory = id_factory or new_block_id
        self._order = []
        self._blocks = {}
        for block in blocks or []:
            self.append(block)

    def __len__(self):
        return len(self._order)

    def __iter__(self):
        return (self._blocks[block_id] for block_id in self._order)

    def __contains__(self, block_id):
        return block_id in self._blocks

    @property
    def ids(self):
        return list(self._order)

    def get(self, block_id):
        try:
            return self._blocks[block_id]
        except KeyError:
            raise BlockNotFoundError(block_id) from None

    def index_of(self, block_id):
        self.get(block_id)
        return self._order.index(block_id)

    def append(self, block):
        if block.id in self._blocks:
            raise BlockValidationError(f"Duplicate block id: {block.id}")
        self._order.append(block.id)
        self._blocks[block.id] = block
        return block

    def create(self, block_type, **fields):
        """New block from registry defaults, appended with a fresh id"""
        block_id = self.id_factory()
        if block_id in self._blocks:
            raise BlockValidationError(f"Id factory produced a duplicate id: {block_id}")
        return self.append(self.registry.create(block_type, block_id=block_id, **fields))

    def replace(self, block):
        self.get(block.id)
        self._blocks[block.id] = block
        return block

    def remove(self, block_id):
        block = self.get(block_id)
        self._order.remove(block_id)
        del self._blocks[block_id]
        return block

    def move(self, block_id, index):
        self.get(block_id)
        if not isinstance(index, int):
            raise BlockValidationError("Index must be an integer")
        self._order.remove(block_id)
        index = max(0, min(index, len(self._order)))
        self._order.insert(index, block_id)


class SelectionCursor:
    """At most one selected block id"""

    def __init__(self, collection):
        self._collection = collection
        self.selected_id = None

    def select(self, block_id):
        if block_id is None:
            self.clear()
            return None
        self._collection.get(block_id)
        self.selected_id = block_id
        return block_id

    def clear(self):
        self.selected_id = None

    def is_selected(self, block_id):
        return self.selected_id is not None and self.selected_id == block_id

    @property
    def selected(self):
        if self.selected_id is None:
            return None
        return self._collection.get(self.selected_id)

    def forget(self, block_id):
        """Drop the selection if it points at block_id"""
        if self.is_selected(block_id):
            self.clear()


class Document:
    """Editor document. Subclasses bind the registry and metadata model.

    auto_select controls whether add_block selects the new block:
    'never', 'always', or 'first' (only when the document was empty).
    """
    kind = 'document'
    registry = None
    metadata_class = BaseModel
    statuses = ('draft',)
    collection_class = BlockCollection
    auto_select = 'never'

    def __init__(self, metadata=None, blocks=None, status='draft', record_id=None, id_factory=None):
        if isinstance(metadata, dict):
            metadata = self._validate_metadata(metadata)
        self.metadata = metadata or self.metadata_class()
        self.blocks = self.collection_class(self.registry, blocks, id_factory)
        self.selection = SelectionCursor(self.blocks)
        self.status = self._validate_status(status)
        self.record_id = record_id

    def __len__(self):
        return len(self.blocks)

    def __repr__(self):
        return f"<{type(self).__name__} {len(self.blocks)} blocks, status={self.status}>"

    def _validate_metadata(self, data):
        try:
            return self.metadata_class.model_validate(data)
        except ValidationError as e:
            raise BlockValidationError(str(e)) from e

    def _validate_status(self, status):
        if status not in self.statuses:
            raise BlockValidationError(f"Invalid status for {self.kind}: {status}")
        return status

    # ---- blocks -------------------------------------------------------

    def add_block(self, block_type, position=None):
        """Append a new block built from the registry defaults; returns its id."""
        if position is not None:
            raise BlockValidationError(f"{self.kind} blocks are ordered, not positioned")
        was_empty = len(self.blocks) == 0
        block = self.blocks.create(block_type)
        self._after_add(block, was_empty)
        return block.id

    def _after_add(self, block, was_empty):
        if self.auto_select == 'always' or (self.auto_select == 'first' and was_empty):
            self.selection.select(block.id)

    def update_block(self, block_id, /, content=None, style=None, **other):
        """Shallow-merge partial content/style (and other fields) into a block."""
        block = self.blocks.get(block_id)
        data = block.model_dump()
        if content is not None:
            data['content'] = block.content.merged(content).model_dump()
        if style is not None:
            data['style'] = block.style.merged(style).model_dump()
        for key, value in other.items():
            if key in PROTECTED_FIELDS:
                raise BlockValidationError(f"Block {key} cannot be changed")
            if key not in type(block).model_fields:
                raise BlockValidationError(f"Unknown field for {block.type} block: {key}")
            data[key] = value
        try:
            updated = type(block).model_validate(data)
        except ValidationError as e:
            raise BlockValidationError(str(e)) from e
        return self.blocks.replace(updated)

    def delete_block(self, block_id):
        block = self.blocks.remove(block_id)
        self.selection.forget(block_id)
        return block

    def move_block(self, block_id, index):
        self.blocks.move(block_id, index)

    def commit_inline_text(self, block_id, value, field='text'):
        """Write back text edited in place on the rendered surface."""
        return self.update_block(block_id, content={field: value})

    # ---- selection ----------------------------------------------------

    def select(self, block_id):
        return self.selection.select(block_id)

    def clear_selection(self):
        self.selection.clear()

    # ---- metadata / status --------------------------------------------

    def update_metadata(self, /, **fields):
        data = self.metadata.model_dump()
        data.update(fields)
        self.metadata = self._validate_metadata(data)
        return self.metadata

    def set_status(self, status):
        self.status = self._validate_status(status)
        return self.status

    def copy(self):
        """Independent copy used as a save snapshot (blocks are immutable)."""
        clone = type(self)(
            metadata=self.metadata,
            blocks=list(self.blocks),
            status=self.status,
            record_id=self.record_id,
            id_factory=self.blocks.id_factory,
        )
        clone.selection.selected_id = self.selection.selected_id
        return clone


class PositionedDocument(Document):
    """Document whose blocks carry a canvas position"""

    def add_block(self, block_type, position=None):
        if position is None:
            position = Position()
        elif not isinstance(position, Position):
            try:
                position = Position.model_validate(position)
            except ValidationError as e:
                raise BlockValidationError(str(e)) from e
        was_empty = len(self.blocks) == 0
        block = self.blocks.create(block_type, position=position)
        self._after_add(block, was_empty)
        return block.id
