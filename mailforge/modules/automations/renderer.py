"""
Workflow Renderer
=================

Renders an automation document as a canvas: absolutely positioned node
cards plus an SVG layer with one line per edge.
"""

import logging
from markupsafe import escape

from ...editor.rendering import RenderOptions, edit_wrapper

logger = logging.getLogger(__name__)

NODE_WIDTH = 200
NODE_HEIGHT = 80

CANVAS_WIDTHS = {
    'desktop': '100%',
    'mobile': '360px',
}


def node_summary(node):
    """One-line description shown under the node title"""
    config = node.content
    if node.type == 'trigger':
        return f"When: {config.event}"
    if node.type == 'action':
        return f"Send: {config.email_id or 'Select email'}"
    if node.type == 'delay':
        return f"Wait: {config.duration} {config.unit}"
    if node.type == 'condition':
        return f"If: {config.field} {config.operator} {config.value}".rstrip()
    return ''


def render_node(node, options=None):
    options = options or RenderOptions()
    inner = f'''<div class="mf-node__header" style="display:flex;align-items:center;gap:8px;">
                <span class="mf-node__dot" style="width:12px;height:12px;border-radius:50%;background:{escape(node.style.color)};"></span>
                <strong>{escape(node.title)}</strong>
            </div>
            <div class="mf-node__summary" style="font-size:12px;color:#6b7280;margin-top:6px;">{escape(node_summary(node))}</div>'''

    position = (
        f"position:absolute;left:{node.position.x:g}px;top:{node.position.y:g}px;"
        f"width:{NODE_WIDTH}px;min-height:{NODE_HEIGHT}px;box-sizing:border-box;"
        "background:#ffffff;border-radius:8px;padding:12px;box-shadow:0 1px 3px rgba(0,0,0,0.15);"
    )
    return edit_wrapper(node, inner, options, style=position)


def render_edges(graph):
    """SVG lines from the bottom of each source node to the top of its target"""
    lines = []
    for from_id, to_id in graph.edges:
        source, target = graph.get(from_id), graph.get(to_id)
        x1 = source.position.x + NODE_WIDTH / 2
        y1 = source.position.y + NODE_HEIGHT
        x2 = target.position.x + NODE_WIDTH / 2
        y2 = target.position.y
        lines.append(
            f'<line data-from="{escape(from_id)}" data-to="{escape(to_id)}" '
            f'x1="{x1:g}" y1="{y1:g}" x2="{x2:g}" y2="{y2:g}" '
            'stroke="#9ca3af" stroke-width="2" marker-end="url(#mf-arrow)" />'
        )
    return (
        '<svg class="mf-canvas__edges" style="position:absolute;inset:0;width:100%;height:100%;pointer-events:none;">'
        '<defs><marker id="mf-arrow" markerWidth="10" markerHeight="10" refX="8" refY="3" orient="auto">'
        '<path d="M0,0 L0,6 L9,3 z" fill="#9ca3af" /></marker></defs>'
        + ''.join(lines) +
        '</svg>'
    )


def render_workflow(document, options=None):
    """Render the automation canvas (nodes + edges) as an HTML fragment"""
    options = options or RenderOptions()
    graph = document.nodes

    if len(graph) == 0:
        body = (
            '<div class="mf-canvas__empty" style="text-align:center;padding-top:160px;color:#6b7280;">'
            'Start building your automation by adding a trigger</div>'
        )
    else:
        body = render_edges(graph) + '\n'.join(render_node(node, options) for node in graph)

    grid = ''
    if options.editing:
        grid = (
            'background-image:linear-gradient(rgba(0,0,0,0.1) 1px, transparent 1px),'
            'linear-gradient(90deg, rgba(0,0,0,0.1) 1px, transparent 1px);background-size:20px 20px;'
        )

    return (
        f'<div class="mf-canvas mf-canvas--{options.viewport}" data-automation="{escape(document.metadata.name)}" '
        f'data-status="{document.status}" '
        f'style="position:relative;width:{CANVAS_WIDTHS[options.viewport]};min-height:600px;overflow:auto;{grid}">'
        f'{body}</div>'
    )
