"""Borrower management routes"""
from flask import jsonify
from flask_login import current_user
from stashbook import db
from stashbook.borrowers import borrowers_bp
from stashbook.borrowers.forms import BorrowerForm
from stashbook.models import Borrower
from stashbook.utils.activity import log_create, log_update, log_delete
from stashbook.utils.decorators import login_required, admin_required
from stashbook.utils.helpers import json_error, form_errors

def _snapshot(borrower):
    return {'name': borrower.name, 'contactInfo': borrower.contact_info}

@borrowers_bp.route('', methods=['GET'])
@login_required
def list_borrowers():
    """List all borrowers with their loans"""
    borrowers = Borrower.query.order_by(Borrower.created_at.desc()).all()
    return jsonify([b.to_dict(include_loans=True) for b in borrowers])

@borrowers_bp.route('', methods=['POST'])
@login_required
def create_borrower():
    """Add new borrower"""
    form = BorrowerForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    borrower = Borrower(name=form.name.data.strip(), contact_info=form.contact_info.data or None)
    db.session.add(borrower)
    db.session.flush()

    log_create(current_user.id, 'OTHER', borrower.id, borrower.name, _snapshot(borrower), label='borrower')
    db.session.commit()

    return jsonify(borrower.to_dict()), 201

@borrowers_bp.route('/<int:borrower_id>', methods=['GET'])
@login_required
def get_borrower(borrower_id):
    """View borrower details"""
    borrower = db.session.get(Borrower, borrower_id)
    if borrower is None:
        return json_error('Borrower not found', 404)
    return jsonify(borrower.to_dict(include_loans=True))

@borrowers_bp.route('/<int:borrower_id>', methods=['PUT', 'PATCH'])
@login_required
def update_borrower(borrower_id):
    """Edit borrower"""
    borrower = db.session.get(Borrower, borrower_id)
    if borrower is None:
        return json_error('Borrower not found', 404)

    form = BorrowerForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    old_value = _snapshot(borrower)
    borrower.name = form.name.data.strip()
    borrower.contact_info = form.contact_info.data or None

    log_update(current_user.id, 'OTHER', borrower.id, borrower.name, old_value, _snapshot(borrower), label='borrower')
    db.session.commit()

    return jsonify(borrower.to_dict())

@borrowers_bp.route('/<int:borrower_id>', methods=['DELETE'])
@admin_required
def delete_borrower(borrower_id):
    """Delete a borrower who has no loans"""
    borrower = db.session.get(Borrower, borrower_id)
    if borrower is None:
        return json_error('Borrower not found', 404)

    if borrower.loans.count():
        return json_error('Cannot delete borrower with existing loans', 400)

    log_delete(current_user.id, 'OTHER', borrower.id, borrower.name, _snapshot(borrower), label='borrower')
    db.session.delete(borrower)
    db.session.commit()

    return '', 204
