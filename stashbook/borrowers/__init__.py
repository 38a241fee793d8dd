"""Borrowers blueprint"""
from flask import Blueprint

borrowers_bp = Blueprint('borrowers', __name__)

from stashbook.borrowers import routes
