"""Owners blueprint"""
from flask import Blueprint

owners_bp = Blueprint('owners', __name__)

from stashbook.owners import routes
