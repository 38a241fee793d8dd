"""Activities blueprint"""
from flask import Blueprint

activities_bp = Blueprint('activities', __name__)

from stashbook.activities import routes
