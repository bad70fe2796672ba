"""
Automations Module
==================

Provides:
- Workflow builder with trigger, action, condition and delay nodes
- Node connections on a canvas (edges are pruned when a node is deleted)
- Save with trigger_type / trigger_config surfaced on the record
"""

from flask import Blueprint

automations_bp = Blueprint('automations', __name__, url_prefix='/api/automations')

from . import routes
