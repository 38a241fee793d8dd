"""Stashes blueprint"""
from flask import Blueprint

stashes_bp = Blueprint('stashes', __name__)

from stashbook.stashes import routes
