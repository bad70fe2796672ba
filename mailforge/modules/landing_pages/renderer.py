"""
Landing Page Renderer
=====================

Renders a landing page document into a standalone HTML page. Text
sections keep their line breaks and are editable in place in edit mode.
"""

import logging
from markupsafe import escape

from ...editor.rendering import RenderOptions, css, edit_wrapper, inline_text_attrs, text_to_html

logger = logging.getLogger(__name__)

VIEWPORT_WIDTHS = {
    'desktop': '100%',
    'mobile': '375px',
}

ACCENT = '#dc2626'


def _button(text, url, background=ACCENT, color='#ffffff'):
    return (
        f'<a href="{escape(url)}" class="mf-page__button" style="display:inline-block;'
        f'background:{escape(background)};color:{escape(color)};padding:14px 32px;'
        f'border-radius:6px;font-weight:bold;text-decoration:none;">{escape(text)}</a>'
    )


def _render_hero(block, options):
    content = block.content
    background = ''
    if content.background_image:
        background = (
            f"background-image:linear-gradient(rgba(0,0,0,0.5),rgba(0,0,0,0.5)),"
            f"url('{escape(content.background_image)}');background-size:cover;background-position:center;"
        )
    return f'''<section style="{css(block.style)}{background}">
                <h1 style="font-size:48px;margin:0 0 16px;">{escape(content.headline)}</h1>
                <p style="font-size:20px;margin:0 0 32px;opacity:0.9;">{escape(content.subheadline)}</p>
                {_button(content.button_text, content.button_url)}
            </section>'''


def _render_text(block, options):
    return (
        f'<section style="{css(block.style)}">'
        f'<div style="max-width:800px;margin:0 auto;"{inline_text_attrs(block, options)}>'
        f'{text_to_html(block.content.text)}</div></section>'
    )


def _render_image(block, options):
    content = block.content
    caption = ''
    if content.caption:
        caption = f'<p style="font-size:14px;color:#6b7280;margin-top:8px;">{escape(content.caption)}</p>'
    return (
        f'<section style="{css(block.style)}">'
        f'<img src="{escape(content.src)}" alt="{escape(content.alt)}" '
        f'style="max-width:100%;height:auto;border-radius:8px;" />{caption}</section>'
    )


def _render_form(block, options):
    content = block.content
    inputs = ''.join(
        f'<input type="{"email" if field == "email" else "text"}" name="{escape(field)}" '
        f'placeholder="{escape(field.replace("_", " ").title())}" required '
        'style="display:block;width:100%;box-sizing:border-box;padding:12px;margin-bottom:12px;'
        'border:1px solid #d1d5db;border-radius:6px;" />'
        for field in content.fields
    )
    return f'''<section style="{css(block.style)}">
                <div style="max-width:480px;margin:0 auto;">
                    <h2 style="margin:0 0 8px;">{escape(content.title)}</h2>
                    <p style="color:#6b7280;margin:0 0 24px;">{escape(content.description)}</p>
                    <form class="mf-page__form" data-success-message="{escape(content.success_message)}">
                        {inputs}
                        <button type="submit" style="width:100%;background:{ACCENT};color:#ffffff;padding:12px;border:none;border-radius:6px;font-weight:bold;">{escape(content.button_text)}</button>
                    </form>
                </div>
            </section>'''


def _render_testimonial(block, options):
    content = block.content
    avatar = ''
    if content.avatar:
        avatar = (
            f'<img src="{escape(content.avatar)}" alt="{escape(content.author)}" '
            'style="width:48px;height:48px;border-radius:50%;object-fit:cover;" />'
        )
    return f'''<section style="{css(block.style)}">
                <blockquote style="font-size:20px;font-style:italic;max-width:700px;margin:0 auto 24px;">&ldquo;{escape(content.quote)}&rdquo;</blockquote>
                <div style="display:flex;align-items:center;justify-content:center;gap:12px;">
                    {avatar}
                    <div><strong>{escape(content.author)}</strong><div style="color:#6b7280;font-size:14px;">{escape(content.company)}</div></div>
                </div>
            </section>'''


def _render_features(block, options):
    content = block.content
    items = ''.join(
        '<div class="mf-page__feature" style="flex:1;min-width:200px;text-align:center;padding:16px;">'
        f'<h3 style="margin:0 0 8px;">{escape(item.title)}</h3>'
        f'<p style="color:#6b7280;margin:0;">{escape(item.description)}</p></div>'
        for item in content.features
    )
    return f'''<section style="{css(block.style)}">
                <h2 style="text-align:center;margin:0 0 32px;">{escape(content.title)}</h2>
                <div style="display:flex;flex-wrap:wrap;gap:24px;max-width:1000px;margin:0 auto;">{items}</div>
            </section>'''


def _render_cta(block, options):
    content = block.content
    return f'''<section style="{css(block.style)}">
                <h2 style="font-size:36px;margin:0 0 16px;">{escape(content.headline)}</h2>
                <p style="font-size:18px;margin:0 0 32px;opacity:0.9;">{escape(content.description)}</p>
                {_button(content.button_text, content.button_url, background='#ffffff', color=ACCENT)}
            </section>'''


SECTION_RENDERERS = {
    'hero': _render_hero,
    'text': _render_text,
    'image': _render_image,
    'form': _render_form,
    'testimonial': _render_testimonial,
    'features': _render_features,
    'cta': _render_cta,
}


def render_section(block, options=None):
    options = options or RenderOptions()
    renderer = SECTION_RENDERERS.get(block.type)
    if renderer is None:
        logger.warning(f"No landing page renderer for block type {block.type}")
        return ''
    return edit_wrapper(block, renderer(block, options), options)


def render_landing_page(document, options=None):
    """Render a full landing page (settings + ordered sections) as HTML"""
    options = options or RenderOptions()
    settings = document.metadata
    width = VIEWPORT_WIDTHS[options.viewport]

    if len(document.blocks) == 0:
        body_html = (
            '<div class="mf-page__empty" style="text-align:center;padding:120px 20px;color:#6b7280;">'
            'Add a section to start building your page</div>'
        )
    else:
        body_html = '\n        '.join(render_section(block, options) for block in document.blocks)

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(settings.title)}</title>
    <meta name="description" content="{escape(settings.description)}">
</head>
<body style="margin:0;padding:0;font-family:Arial, Helvetica, sans-serif;color:#111827;">
    <main class="mf-page mf-page--{options.viewport}" data-slug="{escape(settings.slug)}" style="max-width:{width};margin:0 auto;">
        {body_html}
    </main>
</body>
</html>'''
