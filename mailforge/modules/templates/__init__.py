"""
Templates Module
================

Provides:
- Gallery of public email templates with search and category filters
- Built-in sample templates when none are stored
- Apply a template as a new draft campaign; save a campaign as a template
"""

from flask import Blueprint

templates_bp = Blueprint('templates', __name__, url_prefix='/api/templates')

from . import routes
