"""
Block type registry
===================

Maps a type tag to its Block subclass, which carries the default content
and default style for new blocks of that type.
"""
from typing import Annotated, Union

from pydantic import Field, TypeAdapter, ValidationError

from .blocks import new_block_id
from .errors import BlockValidationError, UnknownBlockTypeError


class BlockRegistry:
    """Closed set of block variants for one editor.

    Usage:
        >>> registry = BlockRegistry('email', [TextBlock, ImageBlock])
        >>> registry.defaults('text')
        ({'text': 'Your text here...'}, {...})
    """

    def __init__(self, name, block_classes, labels=None):
        self.name = name
        self._classes = {}
        for cls in block_classes:
            self._classes[cls.model_fields['type'].default] = cls
        self.labels = labels or {}
        self._adapter = TypeAdapter(
            Annotated[Union[tuple(block_classes)], Field(discriminator='type')]
        )

    def __contains__(self, block_type):
        return block_type in self._classes

    def __repr__(self):
        return f"<BlockRegistry {self.name}: {', '.join(self.types)}>"

    @property
    def types(self):
        return list(self._classes)

    def block_class(self, block_type):
        try:
            return self._classes[block_type]
        except KeyError:
            raise UnknownBlockTypeError(block_type, self.name) from None

    def defaults(self, block_type):
        """Default (content, style) mappings for a type; empty for unknown types."""
        cls = self._classes.get(block_type)
        if cls is None:
            return {}, {}
        content = cls.model_fields['content'].default_factory()
        style = cls.model_fields['style'].default_factory()
        return content.model_dump(), style.model_dump()

    def create(self, block_type, block_id=None, **fields):
        """Build a new block of block_type from the registry defaults."""
        cls = self.block_class(block_type)
        try:
            return cls(id=block_id or new_block_id(), **fields)
        except ValidationError as e:
            raise BlockValidationError(str(e)) from e

    def decode(self, data):
        """Per-variant deserializer for a block mapping."""
        if not isinstance(data, dict):
            raise BlockValidationError(f"Block must be a mapping, got {type(data).__name__}")
        if data.get('type') not in self._classes:
            raise UnknownBlockTypeError(data.get('type'), self.name)
        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            raise BlockValidationError(str(e)) from e

    def encode(self, block):
        return block.model_dump(mode='json')
