"""
Mailforge Modules
=================

Flask blueprint modules for the builders.
"""

__all__ = ['auth', 'campaigns', 'automations', 'landing_pages', 'templates']
