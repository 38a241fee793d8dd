"""Transactions blueprint"""
from flask import Blueprint

transactions_bp = Blueprint('transactions', __name__)

from stashbook.transactions import routes
