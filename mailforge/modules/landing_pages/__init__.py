"""
Landing Pages Module
====================

Provides:
- Section-based page builder (hero, text, image, form, testimonial, features, CTA)
- Newly added sections are selected for editing straight away
- Desktop and mobile preview, publish under a slug
"""

from flask import Blueprint

landing_pages_bp = Blueprint('landing_pages', __name__, url_prefix='/api/landing-pages')

from . import routes
