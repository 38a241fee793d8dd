"""Role based access control

Every check is a pure function of the role handed in. An absent or
unrecognised role is never an error here: it simply fails every check.
"""
from collections import namedtuple
from enum import Enum

from stashbook.exceptions import InvalidRoleError, InvalidStatusError


class Role(str, Enum):
    """User roles, lowest privilege first"""
    USER = 'USER'
    ADMIN = 'ADMIN'
    SUPERADMIN = 'SUPERADMIN'


class UserStatus(str, Enum):
    """Account lifecycle states"""
    PENDING = 'PENDING'
    ACTIVE = 'ACTIVE'
    DEACTIVATED = 'DEACTIVATED'


ROLE_RANK = {
    Role.USER: 0,
    Role.ADMIN: 1,
    Role.SUPERADMIN: 2,
}

# Section prefixes and the least role that may open them
ROUTE_ACCESS = (
    (('/users', '/activities'), Role.SUPERADMIN),
    (('/owners', '/stashes'), Role.ADMIN),
    (('/dashboard', '/borrowers', '/loans', '/repayments', '/transactions'), Role.USER),
)

Principal = namedtuple('Principal', ['id', 'role'])


def parse_role(value):
    """Validate a raw role value, raising InvalidRoleError when unknown"""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        raise InvalidRoleError(f'Unknown role: {value!r}')


def coerce_role(value):
    """Return the Role for value, or None when absent or unknown"""
    if value is None:
        return None
    if isinstance(value, Principal):
        value = value.role
    try:
        return parse_role(value)
    except InvalidRoleError:
        return None


def parse_status(value):
    """Validate a raw account status value"""
    if isinstance(value, UserStatus):
        return value
    try:
        return UserStatus(str(value).strip().upper())
    except ValueError:
        raise InvalidStatusError(f'Unknown status: {value!r}')


def has_role_at_least(role, minimum):
    role = coerce_role(role)
    if role is None:
        return False
    return ROLE_RANK[role] >= ROLE_RANK[minimum]


def is_admin(role):
    """True for ADMIN and SUPERADMIN"""
    return has_role_at_least(role, Role.ADMIN)


def is_super_admin(role):
    """True for SUPERADMIN only"""
    return coerce_role(role) is Role.SUPERADMIN


def can_access_stash(role):
    return is_admin(role)


def can_access_management(role):
    return is_super_admin(role)


def authorize(role, required_roles):
    """Check membership of role in required_roles

    required_roles may be a single role or any iterable of roles. Unknown
    entries in required_roles are ignored.
    """
    role = coerce_role(role)
    if role is None or required_roles is None:
        return False

    if isinstance(required_roles, (str, Role)):
        required_roles = [required_roles]

    allowed = {coerce_role(r) for r in required_roles}
    allowed.discard(None)
    return role in allowed


def has_route_access(role, path):
    """Check whether role may open the application section at path"""
    if not isinstance(path, str) or not path:
        return False

    role = coerce_role(role)
    if role is None:
        return False

    if role is Role.SUPERADMIN:
        return True

    for prefixes, minimum in ROUTE_ACCESS:
        if any(path.startswith(prefix) for prefix in prefixes):
            return has_role_at_least(role, minimum)

    # Unlisted sections are closed
    return False
