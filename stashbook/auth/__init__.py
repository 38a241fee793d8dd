"""Auth blueprint"""
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from stashbook.auth import routes
