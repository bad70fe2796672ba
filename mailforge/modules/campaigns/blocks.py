"""
Email blocks
============

Block vocabulary of the campaign builder: text, image, button, divider
and spacer. Field defaults are the defaults of a newly added block.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ...editor import Block, BlockRegistry, Document, Payload


class TextContent(Payload):
    text: str = 'Your text here...'


class TextStyle(Payload):
    font_size: str = '16px'
    color: str = '#333333'
    text_align: str = 'left'
    font_weight: str = 'normal'


class ImageContent(Payload):
    src: str = 'https://via.placeholder.com/600x300'
    alt: str = 'Image'
    url: str = ''


class ImageStyle(Payload):
    width: str = '100%'
    text_align: str = 'center'


class ButtonContent(Payload):
    text: str = 'Click Here'
    url: str = '#'


class ButtonStyle(Payload):
    background_color: str = '#dc2626'
    color: str = '#ffffff'
    padding: str = '12px 24px'
    border_radius: str = '6px'
    text_align: str = 'center'
    font_size: str = '16px'
    font_weight: str = 'bold'


class DividerContent(Payload):
    pass


class DividerStyle(Payload):
    border_color: str = '#e5e7eb'
    border_width: str = '1px'


class SpacerContent(Payload):
    height: str = '20px'


class SpacerStyle(Payload):
    height: str = '20px'


class TextBlock(Block):
    type: Literal['text'] = 'text'
    content: TextContent = Field(default_factory=TextContent)
    style: TextStyle = Field(default_factory=TextStyle)


class ImageBlock(Block):
    type: Literal['image'] = 'image'
    content: ImageContent = Field(default_factory=ImageContent)
    style: ImageStyle = Field(default_factory=ImageStyle)


class ButtonBlock(Block):
    type: Literal['button'] = 'button'
    content: ButtonContent = Field(default_factory=ButtonContent)
    style: ButtonStyle = Field(default_factory=ButtonStyle)


class DividerBlock(Block):
    type: Literal['divider'] = 'divider'
    content: DividerContent = Field(default_factory=DividerContent)
    style: DividerStyle = Field(default_factory=DividerStyle)


class SpacerBlock(Block):
    type: Literal['spacer'] = 'spacer'
    content: SpacerContent = Field(default_factory=SpacerContent)
    style: SpacerStyle = Field(default_factory=SpacerStyle)


EMAIL_REGISTRY = BlockRegistry(
    'email',
    [TextBlock, ImageBlock, ButtonBlock, DividerBlock, SpacerBlock],
    labels={
        'text': 'Text',
        'image': 'Image',
        'button': 'Button',
        'divider': 'Divider',
        'spacer': 'Spacer',
    },
)


class CampaignSettings(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str = 'New Campaign'
    subject: str = ''
    preheader: str = ''
    from_name: str = ''
    from_email: str = ''


class CampaignDocument(Document):
    kind = 'campaign'
    registry = EMAIL_REGISTRY
    metadata_class = CampaignSettings
    statuses = ('draft', 'scheduled', 'sent')


WELCOME_TEXT = 'Welcome to our newsletter!'


def new_campaign_document():
    """Fresh campaign with the seeded welcome heading"""
    document = CampaignDocument()
    document.blocks.append(TextBlock(
        id=document.blocks.id_factory(),
        content=TextContent(text=WELCOME_TEXT),
        style=TextStyle(font_size='24px', font_weight='bold', text_align='center', color='#333333'),
    ))
    return document
