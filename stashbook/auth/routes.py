"""Authentication routes"""
from flask import jsonify, current_app
from flask_login import login_user, logout_user, current_user
from sqlalchemy.exc import IntegrityError
from stashbook import db
from stashbook.auth import auth_bp
from stashbook.auth.forms import LoginForm, RegistrationForm
from stashbook.models import User
from stashbook.utils.access import ROUTE_ACCESS, Role, UserStatus, has_route_access
from stashbook.utils.activity import log_login, log_logout
from stashbook.utils.decorators import login_required
from stashbook.utils.helpers import json_error, form_errors

@auth_bp.route('/register', methods=['POST'])
def register():
    """Self-service registration; accounts wait for approval"""
    form = RegistrationForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    email = form.email.data.strip().lower()
    if User.query.filter_by(email=email).first():
        return json_error('User already exists with this email', 409)

    user = User(
        email=email,
        first_name=form.first_name.data or None,
        last_name=form.last_name.data or None,
        role=Role.USER.value,
        status=UserStatus.PENDING.value,
        verified=False
    )
    user.set_password(form.password.data)
    db.session.add(user)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return json_error('User already exists with this email', 409)

    current_app.logger.info('User registered', extra={'user_id': user.id})
    return jsonify({
        'message': 'User registered successfully. Your account is pending approval.',
        'user': user.to_dict()
    }), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    """User login"""
    form = LoginForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    user = User.query.filter_by(email=form.email.data.strip().lower()).first()
    if user is None or not user.check_password(form.password.data):
        return json_error('Invalid credentials', 401)

    if user.status == UserStatus.PENDING.value:
        return json_error('Your account is pending approval.', 403)

    if not user.is_active:
        return json_error('Your account has been deactivated. Please contact administrator.', 403)

    login_user(user, remember=form.remember_me.data)
    log_login(user)
    db.session.commit()

    return jsonify({'user': user.to_dict()})

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """User logout"""
    if current_user.is_authenticated:
        log_logout(current_user)
        db.session.commit()

    logout_user()
    return jsonify({'message': 'You have been logged out successfully.'})

@auth_bp.route('/me')
@login_required
def me():
    """Current user and the application sections open to them"""
    role = current_user.principal.role
    sections = {}
    for prefixes, _ in ROUTE_ACCESS:
        for prefix in prefixes:
            sections[prefix.lstrip('/')] = has_route_access(role, prefix)

    return jsonify({'user': current_user.to_dict(), 'sections': sections})
