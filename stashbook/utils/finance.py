"""Financial summary, repayment status and currency formatting

All money arithmetic goes through Decimal. Malformed monetary values are
treated as zero (fail closed) and reported through the logger, so a summary
always satisfies

    amount_on_hand == total_contributions + total_repayments - total_loans
"""
import logging
from collections import namedtuple
from datetime import datetime, timezone
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from enum import Enum

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
CENTS = Decimal('0.01')
TENTHS = Decimal('0.1')

# Amounts of 10**MAX_MAGNITUDE or more are treated as malformed. Below that,
# sums and roundings under MONEY_CONTEXT are exact to the cent.
MAX_MAGNITUDE = 100
MONEY_CONTEXT = Context(prec=MAX_MAGNITUDE + 40, rounding=ROUND_HALF_UP)

COMPACT_UNITS = (
    (Decimal('1000000000000'), 'T'),
    (Decimal('1000000000'), 'B'),
    (Decimal('1000000'), 'M'),
    (Decimal('1000'), 'K'),
)


class RepaymentStatus(str, Enum):
    PENDING = 'PENDING'
    PAID = 'PAID'
    OVERDUE = 'OVERDUE'


def to_decimal(value, field=None):
    """Convert a monetary value to Decimal, treating malformed input as zero"""
    if value is None:
        return ZERO
    amount = _parse_amount(value)
    if amount is None:
        logger.warning('Malformed monetary value treated as zero',
                       extra={'field': field, 'value': repr(value)})
        return ZERO
    return amount


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _total(records, name):
    total = ZERO
    with localcontext(MONEY_CONTEXT):
        for record in records or ():
            value = _field(record, name)
            if value is None:
                continue
            total += to_decimal(value, field=name)
    return total


def money_str(amount):
    """Render a Decimal amount as a fixed two-place string"""
    with localcontext(MONEY_CONTEXT):
        return str(to_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP))


class FinancialSummary(namedtuple('FinancialSummary', [
        'total_contributions', 'total_loans', 'total_repayments', 'amount_on_hand'])):
    """Derived cash position of the lending pool"""
    __slots__ = ()

    def to_dict(self):
        return {
            'totalContributions': money_str(self.total_contributions),
            'totalLoans': money_str(self.total_loans),
            'totalRepayments': money_str(self.total_repayments),
            'amountOnHand': money_str(self.amount_on_hand),
        }


def summarize(stashes, loans, repayments):
    """Sum contributions, loan principals and repayments received

    Records may be ORM rows, plain objects or dicts. Repayments with no
    amount_paid contribute nothing. The cash on hand is not clamped and
    goes negative when more has been lent than collected.
    """
    total_contributions = _total(stashes, 'amount')
    total_loans = _total(loans, 'principal')
    total_repayments = _total(repayments, 'amount_paid')

    with localcontext(MONEY_CONTEXT):
        amount_on_hand = total_contributions + total_repayments - total_loans

    return FinancialSummary(
        total_contributions=total_contributions,
        total_loans=total_loans,
        total_repayments=total_repayments,
        amount_on_hand=amount_on_hand,
    )


def _naive_utc(moment):
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def _is_before(due_date, now):
    # Plain dates compare by calendar day
    if not isinstance(due_date, datetime) or not isinstance(now, datetime):
        due_day = due_date.date() if isinstance(due_date, datetime) else due_date
        today = now.date() if isinstance(now, datetime) else now
        return due_day < today
    return _naive_utc(due_date) < _naive_utc(now)


def derive_status(due_date, payment_date=None, now=None):
    """Work out a repayment's status at read time

    A recorded payment wins over everything else, even one dated in the
    future. Otherwise a due date strictly before now is overdue.
    """
    if payment_date is not None:
        return RepaymentStatus.PAID

    if now is None:
        now = datetime.utcnow()

    if due_date is not None and _is_before(due_date, now):
        return RepaymentStatus.OVERDUE

    return RepaymentStatus.PENDING


def _parse_amount(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    if amount and amount.adjusted() >= MAX_MAGNITUDE:
        return None
    return amount


def format_currency(value, currency_code='PHP'):
    """Format an amount as '<CODE> 1,234.50'"""
    amount = _parse_amount(value)
    if amount is None:
        return f'{currency_code} 0.00'

    with localcontext(MONEY_CONTEXT):
        amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        sign = '-' if amount < 0 else ''
        return f'{sign}{currency_code} {abs(amount):,.2f}'


def _one_place(amount):
    amount = amount.quantize(TENTHS, rounding=ROUND_HALF_UP)
    if amount == amount.to_integral_value():
        return f'{amount:,.0f}'
    return f'{amount:,.1f}'


def format_compact(value, currency_code='PHP'):
    """Format an amount with K/M/B/T abbreviation, e.g. 'PHP 1.5M'

    Malformed input renders as the compact zero, 'PHP 0'.
    """
    amount = _parse_amount(value)
    if amount is None:
        return f'{currency_code} 0'

    with localcontext(MONEY_CONTEXT):
        return _compact(amount, currency_code)


def _compact(amount, currency_code):
    sign = '-' if amount < 0 else ''
    magnitude = abs(amount)

    suffix = ''
    scaled = magnitude.quantize(TENTHS, rounding=ROUND_HALF_UP)
    for index, (threshold, unit) in enumerate(COMPACT_UNITS):
        if magnitude < threshold:
            continue
        scaled = (magnitude / threshold).quantize(TENTHS, rounding=ROUND_HALF_UP)
        suffix = unit
        # 999,950 rounds to 1000.0K, show it as 1M instead
        if scaled >= 1000 and index > 0:
            bigger, suffix = COMPACT_UNITS[index - 1]
            scaled = (magnitude / bigger).quantize(TENTHS, rounding=ROUND_HALF_UP)
        break
    else:
        if scaled >= 1000:
            scaled, suffix = Decimal('1'), 'K'

    if scaled == 0:
        sign = ''
    return f'{sign}{currency_code} {_one_place(scaled)}{suffix}'

