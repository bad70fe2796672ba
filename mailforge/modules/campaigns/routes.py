"""
Campaigns Routes
================

Campaign builder API: editor sessions, block editing, live preview and save.
All routes require a signed-in user.
"""

from ...editor.views import Builder, register_builder_routes
from . import campaigns_bp
from .blocks import new_campaign_document
from .models import campaign_serializer, init_campaigns_db
from .renderer import render_campaign

campaign_builder = Builder(
    'campaign',
    new_document=new_campaign_document,
    serializer=campaign_serializer,
    render=render_campaign,
    init_db=init_campaigns_db,
)

register_builder_routes(campaigns_bp, campaign_builder)
