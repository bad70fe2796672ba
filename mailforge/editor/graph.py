"""
Workflow graph
==============

Nodes are kept in an arena keyed by id; each node's `connections` is its
adjacency list. Deleting a node is a graph operation: every edge that
points at it is pruned from the other nodes.
"""
import logging

from .document import BlockCollection, PositionedDocument
from .errors import InvalidConnectionError

logger = logging.getLogger(__name__)


class WorkflowGraph(BlockCollection):
    """Node arena plus adjacency lists"""

    @property
    def edges(self):
        """All edges as (from_id, to_id) pairs, in node then connection order"""
        return [(node.id, target) for node in self for target in node.connections]

    def outgoing(self, node_id):
        return list(self.get(node_id).connections)

    def incoming(self, node_id):
        self.get(node_id)
        return [node.id for node in self if node_id in node.connections]

    def find_first(self, node_type):
        for node in self:
            if node.type == node_type:
                return node
        return None

    def connect(self, from_id, to_id):
        """Add the edge from_id -> to_id. Returns False if it already existed."""
        source = self.get(from_id)
        self.get(to_id)
        if from_id == to_id:
            raise InvalidConnectionError(f"Node {from_id} cannot connect to itself")
        if to_id in source.connections:
            return False
        self.replace(source.model_copy(update={'connections': source.connections + [to_id]}))
        return True

    def disconnect(self, from_id, to_id):
        """Remove the edge from_id -> to_id. Returns False if there was none."""
        source = self.get(from_id)
        if to_id not in source.connections:
            return False
        remaining = [target for target in source.connections if target != to_id]
        self.replace(source.model_copy(update={'connections': remaining}))
        return True

    def remove(self, block_id):
        node = super().remove(block_id)
        pruned = 0
        for other in list(self):
            if block_id in other.connections:
                self.disconnect(other.id, block_id)
                pruned += 1
        if pruned:
            logger.debug(f"Pruned {pruned} edge(s) into deleted node {block_id}")
        return node

    def dangling_edges(self):
        return [(src, dst) for src, dst in self.edges if dst not in self]


class WorkflowDocument(PositionedDocument):
    """Document over a WorkflowGraph; the first node added to an empty
    canvas becomes selected."""
    collection_class = WorkflowGraph
    auto_select = 'first'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        dangling = self.blocks.dangling_edges()
        for src, dst in dangling:
            self.blocks.disconnect(src, dst)
        if dangling:
            logger.warning(f"Dropped {len(dangling)} dangling edge(s) while loading workflow")

    @property
    def nodes(self):
        return self.blocks

    def connect(self, from_id, to_id):
        return self.blocks.connect(from_id, to_id)

    def disconnect(self, from_id, to_id):
        return self.blocks.disconnect(from_id, to_id)

    def update_block(self, block_id, /, content=None, style=None, **other):
        connections = other.get('connections')
        if connections is not None:
            if block_id in connections:
                raise InvalidConnectionError(f"Node {block_id} cannot connect to itself")
            for target in connections:
                self.blocks.get(target)
            other['connections'] = list(dict.fromkeys(connections))
        return super().update_block(block_id, content=content, style=style, **other)
