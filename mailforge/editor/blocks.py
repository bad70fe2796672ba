"""
Block base types shared by the three builders.

Every builder declares one Block subclass per block type, with a Literal
type tag and dedicated content/style payload classes. The registry turns
those subclasses into a discriminated union for decoding.
"""
import uuid
from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import BlockValidationError


def new_block_id():
    """Collision-resistant block id (never derived from the clock)"""
    return uuid.uuid4().hex


class Payload(BaseModel):
    """Content or style mapping of a block. Unknown keys are kept."""
    model_config = ConfigDict(extra='allow', frozen=True)

    def merged(self, partial):
        """Shallow merge: keys in partial replace ours, siblings are preserved."""
        data = self.model_dump()
        data.update(partial or {})
        try:
            return type(self).model_validate(data)
        except ValidationError as e:
            raise BlockValidationError(str(e)) from e


class EmptyPayload(Payload):
    pass


class Block(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    content: Payload = Field(default_factory=EmptyPayload)
    style: Payload = Field(default_factory=EmptyPayload)


class Position(BaseModel):
    """Canvas coordinate of a workflow node (layout only)"""
    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0


class Node(Block):
    """Workflow node: a block with a title, a canvas position and outgoing edges"""
    title: str = ''
    position: Position = Field(default_factory=Position)
    connections: List[str] = Field(default_factory=list)
