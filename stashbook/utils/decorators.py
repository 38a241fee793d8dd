"""Utility decorators"""
from functools import wraps
from flask_login import current_user
from stashbook.utils.access import Role, authorize, is_admin, is_super_admin
from stashbook.utils.helpers import json_error


def current_principal():
    """The Principal for the logged-in user, or None when anonymous"""
    if not current_user.is_authenticated:
        return None
    return current_user.principal


def roles_required(*roles):
    """Decorator to require one of the given roles"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            principal = current_principal()
            if principal is None:
                return json_error('Unauthorized', 401)

            if not authorize(principal.role, roles):
                return json_error('Forbidden', 403)

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def login_required(f):
    """Decorator to require any authenticated user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_principal() is None:
            return json_error('Unauthorized', 401)
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require ADMIN or SUPERADMIN"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        principal = current_principal()
        if principal is None:
            return json_error('Unauthorized', 401)

        if not is_admin(principal.role):
            return json_error('Forbidden', 403)

        return f(*args, **kwargs)
    return decorated_function


def superadmin_required(f):
    """Decorator to require SUPERADMIN"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        principal = current_principal()
        if principal is None:
            return json_error('Unauthorized', 401)

        if not is_super_admin(principal.role):
            return json_error('Forbidden', 403)

        return f(*args, **kwargs)
    return decorated_function


stash_access_required = roles_required(Role.ADMIN, Role.SUPERADMIN)
