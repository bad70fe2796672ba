"""
Workflow graph tests: connections, pruning on delete, dangling edges.
Run with: pytest tests/test_workflow_graph.py -v
"""

import pytest

from mailforge.editor import BlockNotFoundError, BlockValidationError, InvalidConnectionError
from mailforge.modules.automations.nodes import (
    AutomationDocument, TriggerNode, ActionNode, new_automation_document,
)


@pytest.fixture
def workflow():
    doc = new_automation_document()
    trigger = doc.trigger().id
    action = doc.add_block("action", {"x": 100, "y": 250})
    delay = doc.add_block("delay", {"x": 100, "y": 400})
    return doc, trigger, action, delay


def test_seeded_trigger():
    doc = new_automation_document()
    trigger = doc.trigger()
    assert trigger.title == "Subscriber joins list"
    assert trigger.content.event == "subscribe"
    assert (trigger.position.x, trigger.position.y) == (100, 100)


def test_connect_adds_edge_once(workflow):
    doc, trigger, action, _ = workflow

    assert doc.connect(trigger, action) is True
    assert doc.connect(trigger, action) is False
    assert doc.nodes.edges == [(trigger, action)]


def test_self_loop_rejected(workflow):
    doc, trigger, _, _ = workflow
    with pytest.raises(InvalidConnectionError):
        doc.connect(trigger, trigger)
    assert doc.nodes.edges == []


def test_connect_to_missing_node_rejected(workflow):
    doc, trigger, _, _ = workflow
    with pytest.raises(BlockNotFoundError):
        doc.connect(trigger, "ghost")
    assert doc.nodes.edges == []


def test_cycles_are_allowed(workflow):
    doc, trigger, action, delay = workflow
    doc.connect(trigger, action)
    doc.connect(action, delay)
    doc.connect(delay, action)
    assert doc.nodes.incoming(action) == [trigger, delay]


def test_disconnect(workflow):
    doc, trigger, action, _ = workflow
    doc.connect(trigger, action)

    assert doc.disconnect(trigger, action) is True
    assert doc.disconnect(trigger, action) is False
    assert doc.nodes.outgoing(trigger) == []


def test_delete_node_prunes_incoming_edges(workflow):
    doc, trigger, action, delay = workflow
    doc.connect(trigger, action)
    doc.connect(trigger, delay)
    doc.connect(action, delay)

    doc.delete_block(delay)

    assert delay not in doc.nodes
    assert doc.nodes.edges == [(trigger, action)]
    assert doc.nodes.dangling_edges() == []


def test_update_connections_validated(workflow):
    doc, trigger, action, delay = workflow

    doc.update_block(trigger, connections=[action, action, delay])
    assert doc.nodes.outgoing(trigger) == [action, delay]

    with pytest.raises(InvalidConnectionError):
        doc.update_block(action, connections=[action])
    with pytest.raises(BlockNotFoundError):
        doc.update_block(action, connections=["ghost"])
    assert doc.nodes.outgoing(action) == []


def test_node_position_and_title_update(workflow):
    doc, _, action, _ = workflow
    doc.update_block(action, title="Send welcome", position={"x": 300, "y": 50})

    node = doc.nodes.get(action)
    assert node.title == "Send welcome"
    assert node.position.x == 300


def test_invalid_position_rejected():
    doc = AutomationDocument()
    with pytest.raises(BlockValidationError):
        doc.add_block("action", {"x": "left", "y": 0})
    assert len(doc) == 0


def test_dangling_edges_dropped_on_load():
    trigger = TriggerNode(id="t1", connections=["a1", "gone"])
    action = ActionNode(id="a1")

    doc = AutomationDocument(blocks=[trigger, action])

    assert doc.nodes.edges == [("t1", "a1")]


def test_trigger_lookup_without_trigger():
    doc = AutomationDocument()
    doc.add_block("action")
    assert doc.trigger() is None
