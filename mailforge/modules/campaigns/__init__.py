"""
Campaigns Module
================

Provides:
- Block-based email campaign editor (text, image, button, divider, spacer)
- Live HTML preview for desktop and mobile widths
- Save to the record store; reopen a saved campaign by id
"""

from flask import Blueprint

campaigns_bp = Blueprint('campaigns', __name__, url_prefix='/api/campaigns')

from . import routes
