"""User management routes"""
from flask import jsonify, request
from flask_login import current_user
from sqlalchemy import or_
from stashbook import db
from stashbook.users import users_bp
from stashbook.users.forms import UserCreateForm, UserUpdateForm, RoleForm, StatusForm
from stashbook.models import User
from stashbook.exceptions import InvalidRoleError, InvalidStatusError
from stashbook.utils.access import Role, UserStatus, is_admin, parse_role, parse_status
from stashbook.utils.activity import log_create, log_update, log_delete
from stashbook.utils.decorators import login_required, admin_required, superadmin_required
from stashbook.utils.helpers import json_error, form_errors, get_pagination, pagination_payload

def _can_view(user_id):
    principal = current_user.principal
    return principal.id == user_id or is_admin(principal.role)

@users_bp.route('', methods=['GET'])
@superadmin_required
def list_users():
    """List users with pagination, role/status filters and search"""
    page, limit = get_pagination()
    query = User.query

    status = request.args.get('status')
    if status:
        try:
            query = query.filter(User.status == parse_status(status).value)
        except InvalidStatusError as e:
            return json_error(str(e), 400)

    role = request.args.get('role')
    if role:
        try:
            query = query.filter(User.role == parse_role(role).value)
        except InvalidRoleError as e:
            return json_error(str(e), 400)

    search = request.args.get('search', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern)
        ))

    total = query.count()
    users = query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit).all()

    return jsonify({
        'users': [u.to_dict() for u in users],
        'pagination': pagination_payload(page, limit, total)
    })

@users_bp.route('', methods=['POST'])
@superadmin_required
def create_user():
    form = UserCreateForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    try:
        role = parse_role(form.role.data) if form.role.data else Role.USER
        status = parse_status(form.status.data) if form.status.data else UserStatus.PENDING
    except (InvalidRoleError, InvalidStatusError) as e:
        return json_error(str(e), 400)

    email = form.email.data.strip().lower()
    if User.query.filter_by(email=email).first():
        return json_error('User already exists with this email', 409)

    user = User(
        email=email,
        first_name=form.first_name.data or None,
        last_name=form.last_name.data or None,
        role=role.value,
        status=status.value
    )
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.flush()

    log_create(current_user.id, 'USER', user.id, user.email,
               {'email': user.email, 'role': user.role, 'status': user.status})
    db.session.commit()

    return jsonify(user.to_dict()), 201

@users_bp.route('/<int:user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    if not _can_view(user_id):
        return json_error('Forbidden', 403)

    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found', 404)
    return jsonify(user.to_dict())

@users_bp.route('/<int:user_id>', methods=['PUT', 'PATCH'])
@login_required
def update_user(user_id):
    """Update profile names; self or administrators"""
    if not _can_view(user_id):
        return json_error('Forbidden', 403)

    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found', 404)

    form = UserUpdateForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    old_value = {'firstName': user.first_name, 'lastName': user.last_name}
    if form.provided('first_name'):
        user.first_name = form.first_name.data or None
    if form.provided('last_name'):
        user.last_name = form.last_name.data or None

    log_update(current_user.id, 'USER', user.id, user.full_name, old_value,
               {'firstName': user.first_name, 'lastName': user.last_name})
    db.session.commit()

    return jsonify(user.to_dict())

@users_bp.route('/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found', 404)

    if user.id == current_user.id:
        return json_error('You cannot delete your own account', 400)

    log_delete(current_user.id, 'USER', user.id, user.email, user.to_dict())
    db.session.delete(user)
    db.session.commit()

    return '', 204

@users_bp.route('/<int:user_id>/role', methods=['PATCH'])
@superadmin_required
def update_role(user_id):
    """Change a user's role"""
    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found', 404)

    form = RoleForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    try:
        role = parse_role(form.role.data)
    except InvalidRoleError:
        return json_error('Invalid role', 400)

    old_role = user.role
    user.role = role.value

    log_update(current_user.id, 'USER', user.id, f'User {user.full_name}',
               {'role': old_role}, {'role': user.role})
    db.session.commit()

    return jsonify(user.to_dict())

@users_bp.route('/<int:user_id>/status', methods=['PATCH'])
@superadmin_required
def update_status(user_id):
    """Approve, deactivate or reactivate an account"""
    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found', 404)

    form = StatusForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    try:
        status = parse_status(form.status.data)
    except InvalidStatusError:
        return json_error('Invalid status', 400)

    old_status = user.status
    user.status = status.value
    if status is UserStatus.ACTIVE:
        user.verified = True

    log_update(current_user.id, 'USER', user.id, f'User {user.full_name}',
               {'status': old_status}, {'status': user.status})
    db.session.commit()

    return jsonify(user.to_dict())
