"""Repayments blueprint"""
from flask import Blueprint

repayments_bp = Blueprint('repayments', __name__)

from stashbook.repayments import routes
