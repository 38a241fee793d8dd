"""Helper functions"""
from collections import namedtuple
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from dateutil.relativedelta import relativedelta
from flask import current_app, jsonify, request

from stashbook.exceptions import ScheduleError
from stashbook.utils.finance import CENTS, to_decimal

ScheduledRepayment = namedtuple('ScheduledRepayment', ['due_date', 'amount_due', 'is_last_payment'])


def json_error(message, status, **extra):
    """Build a JSON error response"""
    payload = {'error': message}
    payload.update(extra)
    return jsonify(payload), status


def form_errors(form):
    """Flatten WTForms errors into a single JSON error response"""
    fields = {name: messages[0] for name, messages in form.errors.items() if messages}
    message = next(iter(fields.values()), 'Invalid request')
    return json_error(message, 400, fields=fields)


def parse_date(value):
    """Coerce a date, datetime or ISO 8601 string to a date"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00')).date()


def parse_datetime(value):
    """Coerce an ISO 8601 string or date to a datetime"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))


def get_client_ip():
    """Get the client IP, honouring proxy headers"""
    for header in ('X-Forwarded-For', 'X-Real-IP', 'X-Client-IP'):
        value = request.headers.get(header)
        if value:
            return value.split(',')[0].strip()
    return request.remote_addr or 'Unknown'


def get_pagination(default_limit=None):
    """Read page/limit query arguments"""
    if default_limit is None:
        default_limit = current_app.config['ITEMS_PER_PAGE']
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    limit = max(request.args.get('limit', default_limit, type=int) or default_limit, 1)
    return page, limit


def pagination_payload(page, limit, total):
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': -(-total // limit),
    }


def months_between(start_date, end_date):
    """Calendar month difference, ignoring the day of month"""
    return (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month)


def validate_repayment_params(principal, interest_rate, start_date, maturity_date):
    """Validate loan terms before building a schedule

    Returns:
        An error message, or None when the terms are usable
    """
    principal = to_decimal(principal, field='principal')
    interest_rate = to_decimal(interest_rate, field='interest_rate')

    if principal <= 0:
        return 'Principal amount must be greater than 0'

    if interest_rate < 0:
        return 'Interest rate cannot be negative'

    if start_date >= maturity_date:
        return 'Maturity date must be after start date'

    if months_between(start_date, maturity_date) < 1:
        return 'Loan term must be at least 1 month'

    return None


def calculate_repayment_schedule(principal, interest_rate, start_date, maturity_date):
    """Build the monthly repayment schedule for a loan

    Interest is flat: principal * rate / 100 over the whole term, spread
    evenly across the months. Every installment but the last is interest
    only; the last one, due on the maturity date, carries the principal
    and whatever interest the rounded installments left over.

    Example:
        100,000 at 12% over 4 months -> 3,000 / 3,000 / 3,000 / 103,000
    """
    principal = to_decimal(principal, field='principal')
    interest_rate = to_decimal(interest_rate, field='interest_rate')

    months = months_between(start_date, maturity_date)
    if months <= 0:
        raise ScheduleError('Maturity date must be after start date')

    total_interest = principal * interest_rate / Decimal('100')
    total_amount = (principal + total_interest).quantize(CENTS, rounding=ROUND_HALF_UP)

    if months == 1:
        return [ScheduledRepayment(maturity_date, total_amount, True)]

    monthly_payment = (total_interest / Decimal(months)).quantize(CENTS, rounding=ROUND_HALF_UP)

    schedule = []
    for i in range(1, months):
        schedule.append(ScheduledRepayment(start_date + relativedelta(months=i), monthly_payment, False))

    # Last installment absorbs the rounding remainder
    final_payment = total_amount - monthly_payment * (months - 1)
    schedule.append(ScheduledRepayment(maturity_date, final_payment, True))

    return schedule


def _plural(count, unit):
    return f'{count} {unit}' if count == 1 else f'{count} {unit}s'


def calculate_loan_terms(start_date, maturity_date):
    """Describe the loan duration in words, e.g. '2 months and 3 days'"""
    if not start_date or not maturity_date:
        return ''

    days = (parse_date(maturity_date) - parse_date(start_date)).days
    if days <= 0:
        return ''

    if days < 7:
        return _plural(days, 'day')

    if days < 30:
        weeks, remaining = divmod(days, 7)
        result = _plural(weeks, 'week')
        if remaining:
            result += f' and {_plural(remaining, "day")}'
        return result

    if days < 365:
        months, remaining = divmod(days, 30)
        result = _plural(months, 'month')
        if remaining:
            result += f' and {_plural(remaining, "day")}'
        return result

    years, remaining = divmod(days, 365)
    months, final_days = divmod(remaining, 30)
    result = _plural(years, 'year')
    if months:
        result += f' and {_plural(months, "month")}'
    elif final_days:
        result += f' and {_plural(final_days, "day")}'
    return result
