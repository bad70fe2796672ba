"""
Workflow nodes
==============

Node vocabulary of the automation builder: trigger, action, condition
and delay. A node's content is its configuration; its style only carries
the colour used on the canvas.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ...editor import BlockRegistry, Node, Payload, Position, WorkflowDocument

DEFAULT_TRIGGER_EVENT = 'subscribe'

TRIGGER_EVENTS = {
    'subscribe': 'Subscriber joins list',
    'tag_added': 'Tag is added',
    'email_opened': 'Email is opened',
    'link_clicked': 'Link is clicked',
    'date_based': 'Date-based trigger',
}

TriggerEvent = Literal['subscribe', 'tag_added', 'email_opened', 'link_clicked', 'date_based']


class TriggerConfig(Payload):
    event: TriggerEvent = DEFAULT_TRIGGER_EVENT
    list_id: str = ''


class ActionConfig(Payload):
    email_id: str = ''
    delay: int = Field(default=0, ge=0)


class ConditionConfig(Payload):
    field: Literal['tag', 'email', 'name', 'custom_field'] = 'tag'
    operator: Literal['contains', 'equals', 'not_equals', 'starts_with'] = 'contains'
    value: str = ''


class DelayConfig(Payload):
    duration: int = Field(default=1, ge=0)
    unit: Literal['minutes', 'hours', 'days', 'weeks'] = 'days'


class NodeStyle(Payload):
    color: str = '#6b7280'


class TriggerStyle(NodeStyle):
    color: str = '#22c55e'


class ActionStyle(NodeStyle):
    color: str = '#3b82f6'


class ConditionStyle(NodeStyle):
    color: str = '#eab308'


class DelayStyle(NodeStyle):
    color: str = '#a855f7'


class TriggerNode(Node):
    type: Literal['trigger'] = 'trigger'
    title: str = 'New Trigger'
    content: TriggerConfig = Field(default_factory=TriggerConfig)
    style: TriggerStyle = Field(default_factory=TriggerStyle)


class ActionNode(Node):
    type: Literal['action'] = 'action'
    title: str = 'Send Email'
    content: ActionConfig = Field(default_factory=ActionConfig)
    style: ActionStyle = Field(default_factory=ActionStyle)


class ConditionNode(Node):
    type: Literal['condition'] = 'condition'
    title: str = 'If/Then'
    content: ConditionConfig = Field(default_factory=ConditionConfig)
    style: ConditionStyle = Field(default_factory=ConditionStyle)


class DelayNode(Node):
    type: Literal['delay'] = 'delay'
    title: str = 'Wait'
    content: DelayConfig = Field(default_factory=DelayConfig)
    style: DelayStyle = Field(default_factory=DelayStyle)


WORKFLOW_REGISTRY = BlockRegistry(
    'workflow',
    [TriggerNode, ActionNode, ConditionNode, DelayNode],
    labels={
        'trigger': 'Trigger',
        'action': 'Send Email',
        'condition': 'Condition',
        'delay': 'Wait',
    },
)


class AutomationSettings(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str = 'New Automation'
    description: str = ''


class AutomationDocument(WorkflowDocument):
    kind = 'automation'
    registry = WORKFLOW_REGISTRY
    metadata_class = AutomationSettings
    statuses = ('draft', 'active', 'paused')

    def trigger(self):
        """First trigger node on the canvas, or None"""
        return self.blocks.find_first('trigger')


def new_automation_document():
    """Fresh automation with the seeded 'Subscriber joins list' trigger"""
    document = AutomationDocument()
    document.blocks.append(TriggerNode(
        id=document.blocks.id_factory(),
        title=TRIGGER_EVENTS[DEFAULT_TRIGGER_EVENT],
        content=TriggerConfig(event=DEFAULT_TRIGGER_EVENT, list_id=''),
        position=Position(x=100, y=100),
    ))
    return document
