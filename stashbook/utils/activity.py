"""Audit trail helpers

Entries are added to the current session and committed together with the
change they describe.
"""
import json
from flask import current_app, has_request_context
from stashbook import db
from stashbook.models import ActivityLog
from stashbook.utils.helpers import get_client_ip


def _dump(value):
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        current_app.logger.warning('Could not serialise activity value', exc_info=True)
        return None


def record_activity(user_id, entity_type, action_type, description,
                    entity_id=None, old_value=None, new_value=None):
    """Add an activity log entry to the session"""
    log = ActivityLog(
        user_id=user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action_type=action_type,
        old_value=_dump(old_value),
        new_value=_dump(new_value),
        description=description,
        ip_address=get_client_ip() if has_request_context() else None
    )
    db.session.add(log)
    current_app.logger.info(description, extra={
        'user_id': user_id,
        'entity_type': entity_type,
        'entity_id': entity_id,
        'action_type': action_type,
    })
    return log


def log_create(user_id, entity_type, entity_id, entity_name, new_value=None, label=None):
    return record_activity(user_id, entity_type, 'CREATE',
                           f'Created {label or entity_type.lower()}: {entity_name}',
                           entity_id=entity_id, new_value=new_value)


def log_update(user_id, entity_type, entity_id, entity_name, old_value=None, new_value=None, label=None):
    return record_activity(user_id, entity_type, 'UPDATE',
                           f'Updated {label or entity_type.lower()}: {entity_name}',
                           entity_id=entity_id, old_value=old_value, new_value=new_value)


def log_delete(user_id, entity_type, entity_id, entity_name, old_value=None, label=None):
    return record_activity(user_id, entity_type, 'DELETE',
                           f'Deleted {label or entity_type.lower()}: {entity_name}',
                           entity_id=entity_id, old_value=old_value)


def log_login(user):
    return record_activity(user.id, 'USER', 'LOGIN', f'User logged in: {user.email}', entity_id=user.id)


def log_logout(user):
    return record_activity(user.id, 'USER', 'LOGOUT', f'User logged out: {user.email}', entity_id=user.id)
