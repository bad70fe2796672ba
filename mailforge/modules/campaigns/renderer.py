"""
Campaign Renderer
=================

Converts a campaign document into a complete HTML email with inline CSS.
In edit mode each block is wrapped with the editor affordances; preview
mode renders the email exactly as recipients see it.
"""

import logging
from markupsafe import escape

from ...editor.rendering import RenderOptions, css, edit_wrapper, inline_text_attrs

logger = logging.getLogger(__name__)

VIEWPORT_WIDTHS = {
    'desktop': '600px',
    'mobile': '320px',
}

# Canvas colours around the email card
DEFAULT_STYLE = {
    'bg': '#f9fafb',
    'card_bg': '#ffffff',
    'border': '#e5e7eb',
    'header_bg': '#f3f4f6',
    'text_secondary': '#6b7280',
    'font': "Arial, Helvetica, sans-serif",
}


def render_block(block, options=None):
    """Render a single email block to HTML with inline CSS"""
    options = options or RenderOptions()
    content, style = block.content, block.style

    if block.type == 'text':
        inner = (
            f'<div style="{css(style)}min-height:40px;padding:8px;"'
            f'{inline_text_attrs(block, options)}>{escape(content.text)}</div>'
        )

    elif block.type == 'image':
        img = (
            f'<img src="{escape(content.src)}" alt="{escape(content.alt)}" '
            f'style="width:{escape(style.width)};max-width:100%;height:auto;" />'
        )
        if content.url:
            img = f'<a href="{escape(content.url)}" target="_blank">{img}</a>'
        inner = f'<div style="text-align:{escape(style.text_align)};padding:8px;">{img}</div>'

    elif block.type == 'button':
        button_css = css(style, text_align=None)
        inner = f'''<div style="text-align:{escape(style.text_align)};padding:8px;">
                <a href="{escape(content.url)}" style="display:inline-block;text-decoration:none;{button_css}" target="_blank">{escape(content.text)}</a>
            </div>'''

    elif block.type == 'divider':
        inner = (
            f'<div style="padding:8px;"><hr style="border:none;'
            f'border-top:{escape(style.border_width)} solid {escape(style.border_color)};margin:0;" /></div>'
        )

    elif block.type == 'spacer':
        inner = f'<div style="height:{escape(style.height)};width:100%;"></div>'

    else:
        logger.warning(f"No email renderer for block type {block.type}")
        return ''

    return edit_wrapper(block, inner, options)


def render_campaign(document, options=None):
    """Render a full campaign (settings + ordered blocks) into an HTML email.

    Args:
        document: CampaignDocument
        options: RenderOptions (viewport, edit/preview mode, selected block)

    Returns:
        Complete HTML email string with all inline CSS
    """
    options = options or RenderOptions()
    style = DEFAULT_STYLE
    settings = document.metadata
    width = VIEWPORT_WIDTHS[options.viewport]

    from_name = settings.from_name or 'Your Name'
    from_email = settings.from_email or 'your@email.com'
    subject = settings.subject or 'Your email subject line'

    preheader_html = ''
    if settings.preheader:
        preheader_html = f'<div style="display:none;max-height:0;overflow:hidden;">{escape(settings.preheader)}</div>'

    body_html = '\n            '.join(render_block(block, options) for block in document.blocks)

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(subject)}</title>
</head>
<body style="margin:0;padding:0;background-color:{style['bg']};font-family:{style['font']};">
    {preheader_html}
    <div class="mf-email mf-email--{options.viewport}" style="max-width:{width};margin:0 auto;padding:24px 0;">
        <div style="background:{style['card_bg']};border:1px solid {style['border']};border-radius:8px;overflow:hidden;">
            <div class="mf-email__header" style="background:{style['header_bg']};padding:12px 16px;border-bottom:1px solid {style['border']};font-size:13px;color:{style['text_secondary']};">
                <div>From: {escape(from_name)} &lt;{escape(from_email)}&gt;</div>
                <div style="font-weight:bold;color:#111827;">{escape(subject)}</div>
            </div>

            <div class="mf-email__body" style="padding:16px;">
            {body_html}
            </div>
        </div>
    </div>
</body>
</html>'''
