"""
Mailforge Auth Module

Provides the signed-in user to the builder front end and the sign-out
route. Signing in is done by the host application's login flow, which
calls AuthContext.sign_in(user).
"""

from flask import Blueprint

auth_bp = Blueprint('mailforge_auth', __name__, url_prefix='/api/auth')

from . import routes

__all__ = ['auth_bp']
