"""Repayment routes

A repayment's status is never stored; filtering and guards below work on
the status derived at request time.
"""
from datetime import datetime
from flask import jsonify, request, current_app
from flask_login import current_user
from stashbook import db
from stashbook.repayments import repayments_bp
from stashbook.repayments.forms import RepaymentForm, RepaymentUpdateForm
from stashbook.models import Loan, Repayment
from stashbook.utils.activity import log_create, log_update, log_delete, record_activity
from stashbook.utils.decorators import login_required, admin_required
from stashbook.utils.finance import RepaymentStatus, format_currency, money_str
from stashbook.utils.helpers import json_error, form_errors

def _snapshot(repayment):
    return {
        'loanId': repayment.loan_id,
        'dueDate': repayment.due_date.isoformat() if repayment.due_date else None,
        'amountDue': money_str(repayment.amount_due),
        'amountPaid': money_str(repayment.amount_paid) if repayment.amount_paid is not None else None,
        'paymentDate': repayment.payment_date.isoformat() if repayment.payment_date else None,
    }

def _describe(repayment):
    return f'{repayment.loan.borrower.name} due {repayment.due_date.isoformat()}'

def compose_reminder(repayment, currency_code, sender):
    """Build the overdue reminder text for a repayment"""
    borrower = repayment.loan.borrower
    return (
        f'Dear {borrower.name},\n\n'
        f'This is a reminder that your loan repayment of '
        f'{format_currency(repayment.amount_due, currency_code)} was due on '
        f'{repayment.due_date:%m/%d/%Y}.\n\n'
        f'Please contact us to arrange payment.\n\n'
        f'Thank you,\n{sender}'
    )

@repayments_bp.route('', methods=['GET'])
@login_required
def list_repayments():
    """List repayments ordered by due date, optionally by derived status"""
    status = request.args.get('status', '').strip().upper()
    if status and status not in RepaymentStatus.__members__:
        return json_error('Invalid repayment status', 400)

    query = Repayment.query
    loan_id = request.args.get('loanId', type=int)
    if loan_id is not None:
        query = query.filter(Repayment.loan_id == loan_id)

    now = datetime.utcnow()
    repayments = query.order_by(Repayment.due_date.asc()).all()
    if status:
        repayments = [r for r in repayments if r.status_at(now) == RepaymentStatus[status]]

    return jsonify([r.to_dict(now=now) for r in repayments])

@repayments_bp.route('', methods=['POST'])
@login_required
def create_repayment():
    form = RepaymentForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    loan = db.session.get(Loan, form.loan_id.data)
    if loan is None:
        return json_error('Loan not found', 404)

    if loan.status != 'ACTIVE':
        return json_error('Cannot add repayments to non-active loan', 400)

    repayment = Repayment(loan=loan, due_date=form.due_date.data, amount_due=form.amount_due.data)
    db.session.add(repayment)
    db.session.flush()

    log_create(current_user.id, 'REPAYMENT', repayment.id, _describe(repayment), _snapshot(repayment))
    db.session.commit()

    return jsonify(repayment.to_dict()), 201

@repayments_bp.route('/<int:repayment_id>', methods=['GET'])
@login_required
def get_repayment(repayment_id):
    repayment = db.session.get(Repayment, repayment_id)
    if repayment is None:
        return json_error('Repayment not found', 404)
    return jsonify(repayment.to_dict())

@repayments_bp.route('/<int:repayment_id>', methods=['PUT', 'PATCH'])
@login_required
def update_repayment(repayment_id):
    """Record a payment or reschedule an installment"""
    repayment = db.session.get(Repayment, repayment_id)
    if repayment is None:
        return json_error('Repayment not found', 404)

    form = RepaymentUpdateForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    old_value = _snapshot(repayment)
    for name in ('amount_due', 'amount_paid', 'due_date', 'payment_date'):
        if form.provided(name):
            setattr(repayment, name, form[name].data)

    log_update(current_user.id, 'REPAYMENT', repayment.id, _describe(repayment), old_value, _snapshot(repayment))
    db.session.commit()

    return jsonify(repayment.to_dict())

@repayments_bp.route('/<int:repayment_id>', methods=['DELETE'])
@admin_required
def delete_repayment(repayment_id):
    repayment = db.session.get(Repayment, repayment_id)
    if repayment is None:
        return json_error('Repayment not found', 404)

    if repayment.status == RepaymentStatus.PAID:
        return json_error('Cannot delete paid repayment', 400)

    log_delete(current_user.id, 'REPAYMENT', repayment.id, _describe(repayment), _snapshot(repayment))
    db.session.delete(repayment)
    db.session.commit()

    return '', 204

@repayments_bp.route('/<int:repayment_id>/send-sms', methods=['POST'])
@login_required
def send_sms(repayment_id):
    """Send an overdue reminder to the borrower

    No gateway is wired in: the message is written to the application log
    and the activity trail.
    """
    repayment = db.session.get(Repayment, repayment_id)
    if repayment is None:
        return json_error('Repayment not found', 404)

    if repayment.status != RepaymentStatus.OVERDUE:
        return json_error('SMS reminder can only be sent for overdue pending repayments', 400)

    borrower = repayment.loan.borrower
    if not borrower.contact_info:
        return json_error('Borrower has no contact information', 400)

    message = compose_reminder(repayment, current_app.config['DEFAULT_CURRENCY'], current_app.config['APP_NAME'])
    current_app.logger.info('SMS reminder queued', extra={
        'repayment_id': repayment.id,
        'recipient': borrower.contact_info,
    })

    record_activity(
        current_user.id, 'REPAYMENT', 'CREATE',
        f'SMS reminder sent to {borrower.name}',
        entity_id=repayment.id,
        new_value={
            'borrowerName': borrower.name,
            'borrowerContact': borrower.contact_info,
            'repaymentId': repayment.id,
            'amountDue': money_str(repayment.amount_due),
            'dueDate': repayment.due_date.isoformat(),
            'smsMessage': message,
        }
    )
    db.session.commit()

    return jsonify({
        'success': True,
        'message': 'SMS reminder sent successfully',
        'borrower': borrower.name,
        'contact': borrower.contact_info,
        'smsMessage': message,
    })
