"""
Rendering helpers shared by the builder renderers.

Renderers are pure: they read a Document and return HTML. Edit mode only
adds affordances (data attributes, selection ring, delete control,
contenteditable text); it never touches the blocks.
"""
import re
from typing import Optional

from markupsafe import escape
from pydantic import BaseModel, ConfigDict, field_validator

VIEWPORTS = ('desktop', 'mobile')

CSS_PROPERTY = re.compile(r'[a-z][a-z0-9-]*')

SELECTED_RING = 'outline:2px solid #ef4444;outline-offset:2px;'


class RenderOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    viewport: str = 'desktop'
    editing: bool = False
    selected_id: Optional[str] = None

    @field_validator('viewport')
    @classmethod
    def _known_viewport(cls, value):
        if value not in VIEWPORTS:
            raise ValueError(f"Unknown viewport: {value} (expected one of {', '.join(VIEWPORTS)})")
        return value


def render_options(document, viewport='desktop', editing=False):
    """Options for rendering document, carrying its current selection"""
    return RenderOptions(
        viewport=viewport,
        editing=editing,
        selected_id=document.selection.selected_id if editing else None,
    )


def _kebab(name):
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1-\2', name)
    return name.replace('_', '-').lower()


def css(style, **overrides):
    """Style mapping (payload or dict) to an inline CSS declaration string"""
    data = style.model_dump() if isinstance(style, BaseModel) else dict(style or {})
    data.update(overrides)
    parts = []
    for key, value in data.items():
        if value is None or value == '' or isinstance(value, (dict, list)):
            continue
        prop = _kebab(str(key))
        # extra payload keys: plain property names only
        if not CSS_PROPERTY.fullmatch(prop):
            continue
        parts.append(f"{escape(prop)}:{escape(str(value))};")
    return ''.join(parts)


def text_to_html(text):
    """Escape text and keep its line breaks"""
    return str(escape(text or '')).replace('\n', '<br>')


def edit_wrapper(block, inner_html, options, style=''):
    """Wrap a rendered block; in edit mode add the editing affordances"""
    if not options.editing:
        return f'<div class="mf-block mf-block--{block.type}" style="{style}">{inner_html}</div>'

    selected = options.selected_id == block.id
    ring = SELECTED_RING if selected else ''
    classes = f"mf-block mf-block--{block.type} mf-block--editable"
    if selected:
        classes += " mf-block--selected"
    return (
        f'<div class="{classes}" data-block-id="{escape(block.id)}" '
        f'data-block-type="{block.type}" style="position:relative;{style}{ring}">'
        f'<button type="button" class="mf-block__delete" data-action="delete" '
        f'data-block-id="{escape(block.id)}" aria-label="Delete block">&times;</button>'
        f'{inner_html}</div>'
    )


def inline_text_attrs(block, options, field='text'):
    """Attributes that make a text element editable in place"""
    if not options.editing:
        return ''
    return (
        f' contenteditable="true" data-inline-field="{field}"'
        f' data-block-id="{escape(block.id)}"'
    )
