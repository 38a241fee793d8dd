"""Stash contribution routes

Contributions are restricted to administrators.
"""
from flask import jsonify, request
from flask_login import current_user
from stashbook import db
from stashbook.stashes import stashes_bp
from stashbook.stashes.forms import StashForm
from stashbook.models import Owner, Stash
from stashbook.utils.activity import log_create, log_update, log_delete
from stashbook.utils.decorators import stash_access_required
from stashbook.utils.finance import money_str
from stashbook.utils.helpers import json_error, form_errors

def _snapshot(stash):
    return {
        'ownerId': stash.owner_id,
        'month': stash.month.isoformat() if stash.month else None,
        'amount': money_str(stash.amount),
        'remarks': stash.remarks,
    }

def _describe(stash):
    return f'{stash.owner.name} {stash.month:%B %Y}'

@stashes_bp.route('', methods=['GET'])
@stash_access_required
def list_stashes():
    """List all contributions, newest month first"""
    query = Stash.query
    owner_id = request.args.get('ownerId', type=int)
    if owner_id is not None:
        query = query.filter(Stash.owner_id == owner_id)
    stashes = query.order_by(Stash.month.desc()).all()
    return jsonify([s.to_dict() for s in stashes])

@stashes_bp.route('', methods=['POST'])
@stash_access_required
def create_stash():
    form = StashForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    owner = db.session.get(Owner, form.owner_id.data)
    if owner is None:
        return json_error('Owner not found', 404)

    stash = Stash(
        owner=owner,
        month=form.month.data,
        amount=form.amount.data,
        remarks=form.remarks.data or None
    )
    db.session.add(stash)
    db.session.flush()

    log_create(current_user.id, 'STASH', stash.id, _describe(stash), _snapshot(stash))
    db.session.commit()

    return jsonify(stash.to_dict()), 201

@stashes_bp.route('/<int:stash_id>', methods=['GET'])
@stash_access_required
def get_stash(stash_id):
    stash = db.session.get(Stash, stash_id)
    if stash is None:
        return json_error('Stash not found', 404)
    return jsonify(stash.to_dict())

@stashes_bp.route('/<int:stash_id>', methods=['PUT', 'PATCH'])
@stash_access_required
def update_stash(stash_id):
    stash = db.session.get(Stash, stash_id)
    if stash is None:
        return json_error('Stash not found', 404)

    form = StashForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    owner = db.session.get(Owner, form.owner_id.data)
    if owner is None:
        return json_error('Owner not found', 404)

    old_value = _snapshot(stash)
    stash.owner = owner
    stash.month = form.month.data
    stash.amount = form.amount.data
    stash.remarks = form.remarks.data or None
    db.session.flush()

    log_update(current_user.id, 'STASH', stash.id, _describe(stash), old_value, _snapshot(stash))
    db.session.commit()

    return jsonify(stash.to_dict())

@stashes_bp.route('/<int:stash_id>', methods=['DELETE'])
@stash_access_required
def delete_stash(stash_id):
    stash = db.session.get(Stash, stash_id)
    if stash is None:
        return json_error('Stash not found', 404)

    log_delete(current_user.id, 'STASH', stash.id, _describe(stash), _snapshot(stash))
    db.session.delete(stash)
    db.session.commit()

    return '', 204
