"""Owner management routes"""
from flask import jsonify
from flask_login import current_user
from stashbook import db
from stashbook.owners import owners_bp
from stashbook.owners.forms import OwnerForm
from stashbook.models import Owner
from stashbook.utils.activity import log_create, log_update, log_delete
from stashbook.utils.decorators import login_required, admin_required
from stashbook.utils.helpers import json_error, form_errors

def _snapshot(owner):
    return {'name': owner.name, 'contactInfo': owner.contact_info}

@owners_bp.route('', methods=['GET'])
@login_required
def list_owners():
    owners = Owner.query.order_by(Owner.created_at.desc()).all()
    return jsonify([o.to_dict() for o in owners])

@owners_bp.route('', methods=['POST'])
@login_required
def create_owner():
    """Add a pool contributor"""
    form = OwnerForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    owner = Owner(name=form.name.data.strip(), contact_info=form.contact_info.data or None)
    db.session.add(owner)
    db.session.flush()

    log_create(current_user.id, 'OTHER', owner.id, owner.name, _snapshot(owner), label='owner')
    db.session.commit()

    return jsonify(owner.to_dict()), 201

@owners_bp.route('/<int:owner_id>', methods=['GET'])
@login_required
def get_owner(owner_id):
    owner = db.session.get(Owner, owner_id)
    if owner is None:
        return json_error('Owner not found', 404)
    return jsonify(owner.to_dict())

@owners_bp.route('/<int:owner_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_owner(owner_id):
    owner = db.session.get(Owner, owner_id)
    if owner is None:
        return json_error('Owner not found', 404)

    form = OwnerForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    old_value = _snapshot(owner)
    owner.name = form.name.data.strip()
    owner.contact_info = form.contact_info.data or None

    log_update(current_user.id, 'OTHER', owner.id, owner.name, old_value, _snapshot(owner), label='owner')
    db.session.commit()

    return jsonify(owner.to_dict())

@owners_bp.route('/<int:owner_id>', methods=['DELETE'])
@admin_required
def delete_owner(owner_id):
    """Delete an owner together with their contributions"""
    owner = db.session.get(Owner, owner_id)
    if owner is None:
        return json_error('Owner not found', 404)

    log_delete(current_user.id, 'OTHER', owner.id, owner.name, _snapshot(owner), label='owner')
    db.session.delete(owner)
    db.session.commit()

    return '', 204
