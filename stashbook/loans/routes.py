"""Loan management routes"""
from flask import jsonify, request
from flask_login import current_user
from stashbook import db
from stashbook.loans import loans_bp
from stashbook.loans.forms import LoanForm, LoanUpdateForm
from stashbook.models import Borrower, Loan, Repayment, Transaction
from stashbook.utils.activity import log_create, log_update, log_delete
from stashbook.utils.decorators import login_required, admin_required
from stashbook.utils.finance import ZERO, money_str
from stashbook.utils.helpers import (json_error, form_errors, validate_repayment_params,
                                     calculate_repayment_schedule, calculate_loan_terms)

def _snapshot(loan):
    return {
        'borrowerId': loan.borrower_id,
        'principal': money_str(loan.principal),
        'interestRate': money_str(loan.interest_rate),
        'startDate': loan.start_date.isoformat() if loan.start_date else None,
        'maturityDate': loan.maturity_date.isoformat() if loan.maturity_date else None,
        'status': loan.status,
    }

@loans_bp.route('', methods=['GET'])
@login_required
def list_loans():
    """List loans with their schedule and ledger"""
    query = Loan.query

    status = request.args.get('status', '').strip().upper()
    if status:
        query = query.filter(Loan.status == status)

    borrower_id = request.args.get('borrowerId', type=int)
    if borrower_id is not None:
        query = query.filter(Loan.borrower_id == borrower_id)

    loans = query.order_by(Loan.created_at.desc()).all()
    return jsonify([loan.to_dict(include_children=True) for loan in loans])

@loans_bp.route('', methods=['POST'])
@login_required
def create_loan():
    """Create a loan with its repayment schedule and disbursement"""
    form = LoanForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    borrower = db.session.get(Borrower, form.borrower_id.data)
    if borrower is None:
        return json_error('Borrower not found', 404)

    principal = form.principal.data
    interest_rate = form.interest_rate.data
    start_date = form.start_date.data
    maturity_date = form.maturity_date.data

    error = validate_repayment_params(principal, interest_rate, start_date, maturity_date)
    if error:
        return json_error(error, 400)

    schedule = calculate_repayment_schedule(principal, interest_rate, start_date, maturity_date)

    loan = Loan(
        borrower=borrower,
        principal=principal,
        interest_rate=interest_rate,
        start_date=start_date,
        maturity_date=maturity_date,
        status='ACTIVE'
    )
    db.session.add(loan)

    for installment in schedule:
        db.session.add(Repayment(loan=loan, due_date=installment.due_date, amount_due=installment.amount_due))

    db.session.add(Transaction(loan=loan, transaction_type='DISBURSEMENT', amount=principal, date=start_date))
    db.session.flush()

    total_due = sum((installment.amount_due for installment in schedule), ZERO)
    new_value = _snapshot(loan)
    new_value.update({
        'repaymentsCount': len(schedule),
        'totalRepaymentAmount': money_str(total_due),
        'term': calculate_loan_terms(start_date, maturity_date),
    })
    log_create(current_user.id, 'LOAN', loan.id,
               f'Loan for {borrower.name} with {len(schedule)} scheduled repayments', new_value)
    db.session.commit()

    return jsonify(loan.to_dict(include_children=True)), 201

@loans_bp.route('/<int:loan_id>', methods=['GET'])
@login_required
def get_loan(loan_id):
    loan = db.session.get(Loan, loan_id)
    if loan is None:
        return json_error('Loan not found', 404)

    data = loan.to_dict(include_children=True)
    data['term'] = calculate_loan_terms(loan.start_date, loan.maturity_date)
    return jsonify(data)

@loans_bp.route('/<int:loan_id>', methods=['PUT', 'PATCH'])
@login_required
def update_loan(loan_id):
    """Update rate, maturity or status of an active loan"""
    loan = db.session.get(Loan, loan_id)
    if loan is None:
        return json_error('Loan not found', 404)

    # Closed and defaulted loans are frozen
    if loan.status != 'ACTIVE':
        return json_error('Cannot modify non-active loan', 400)

    form = LoanUpdateForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    old_value = _snapshot(loan)

    if form.provided('interest_rate'):
        if form.interest_rate.data < 0:
            return json_error('Interest rate cannot be negative', 400)
        loan.interest_rate = form.interest_rate.data

    if form.provided('maturity_date'):
        if form.maturity_date.data <= loan.start_date:
            return json_error('Maturity date must be after start date', 400)
        loan.maturity_date = form.maturity_date.data

    if form.status.data:
        loan.status = form.status.data

    log_update(current_user.id, 'LOAN', loan.id, f'Loan for {loan.borrower.name}', old_value, _snapshot(loan))
    db.session.commit()

    return jsonify(loan.to_dict())

@loans_bp.route('/<int:loan_id>', methods=['DELETE'])
@admin_required
def delete_loan(loan_id):
    """Delete a closed or defaulted loan with its schedule and ledger"""
    loan = db.session.get(Loan, loan_id)
    if loan is None:
        return json_error('Loan not found', 404)

    if loan.status == 'ACTIVE':
        return json_error('Cannot delete active loan', 400)

    log_delete(current_user.id, 'LOAN', loan.id, f'Loan for {loan.borrower.name}', _snapshot(loan))
    db.session.delete(loan)
    db.session.commit()

    return '', 204
