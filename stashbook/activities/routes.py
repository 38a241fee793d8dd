"""Audit trail routes"""
from datetime import timedelta, timezone
from flask import jsonify, request, current_app
from stashbook import db
from stashbook.activities import activities_bp
from stashbook.models import ActivityLog, ENTITY_TYPES, ACTION_TYPES
from stashbook.utils.decorators import superadmin_required
from stashbook.utils.helpers import json_error, get_pagination, pagination_payload, parse_datetime

@activities_bp.route('', methods=['GET'])
@superadmin_required
def list_activities():
    """List audit entries, newest first

    Query args: userId, entityType, actionType, entityId, dateFrom, dateTo,
    page, limit. A plain dateTo date includes the whole day.
    """
    page, limit = get_pagination(current_app.config['ACTIVITY_PAGE_SIZE'])
    query = ActivityLog.query

    user_id = request.args.get('userId', type=int)
    if user_id is not None:
        query = query.filter(ActivityLog.user_id == user_id)

    entity_type = request.args.get('entityType', '').strip().upper()
    if entity_type:
        if entity_type not in ENTITY_TYPES:
            return json_error('Invalid entity type', 400)
        query = query.filter(ActivityLog.entity_type == entity_type)

    action_type = request.args.get('actionType', '').strip().upper()
    if action_type:
        if action_type not in ACTION_TYPES:
            return json_error('Invalid action type', 400)
        query = query.filter(ActivityLog.action_type == action_type)

    entity_id = request.args.get('entityId', type=int)
    if entity_id is not None:
        query = query.filter(ActivityLog.entity_id == entity_id)

    date_from = request.args.get('dateFrom', '').strip()
    date_to = request.args.get('dateTo', '').strip()
    try:
        if date_from:
            query = query.filter(ActivityLog.timestamp >= _naive(parse_datetime(date_from)))
        if date_to:
            upper = _naive(parse_datetime(date_to))
            if len(date_to) == 10:
                query = query.filter(ActivityLog.timestamp < upper + timedelta(days=1))
            else:
                query = query.filter(ActivityLog.timestamp <= upper)
    except ValueError:
        return json_error('Invalid date filter', 400)

    total = query.count()
    activities = (query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
                  .offset((page - 1) * limit).limit(limit).all())

    return jsonify({
        'activities': [a.to_dict() for a in activities],
        'pagination': pagination_payload(page, limit, total)
    })

@activities_bp.route('/<int:activity_id>', methods=['GET'])
@superadmin_required
def get_activity(activity_id):
    activity = db.session.get(ActivityLog, activity_id)
    if activity is None:
        return json_error('Activity not found', 404)
    return jsonify(activity.to_dict())

def _naive(moment):
    # Timestamps are stored as naive UTC
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment
