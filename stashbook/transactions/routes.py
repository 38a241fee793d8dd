"""Loan ledger routes"""
from flask import jsonify, request
from flask_login import current_user
from stashbook import db
from stashbook.transactions import transactions_bp
from stashbook.transactions.forms import TransactionForm
from stashbook.models import Loan, Transaction
from stashbook.utils.activity import log_create
from stashbook.utils.decorators import login_required
from stashbook.utils.finance import money_str
from stashbook.utils.helpers import json_error, form_errors

@transactions_bp.route('', methods=['GET'])
@login_required
def list_transactions():
    query = Transaction.query

    loan_id = request.args.get('loanId', type=int)
    if loan_id is not None:
        query = query.filter(Transaction.loan_id == loan_id)

    transaction_type = request.args.get('type', '').strip().upper()
    if transaction_type:
        query = query.filter(Transaction.transaction_type == transaction_type)

    transactions = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
    return jsonify([t.to_dict() for t in transactions])

@transactions_bp.route('', methods=['POST'])
@login_required
def create_transaction():
    """Record a disbursement or repayment on an active loan"""
    form = TransactionForm.from_request()
    if not form.validate_on_submit():
        return form_errors(form)

    loan = db.session.get(Loan, form.loan_id.data)
    if loan is None:
        return json_error('Loan not found', 404)

    if loan.status != 'ACTIVE':
        return json_error('Cannot add transactions to non-active loan', 400)

    transaction_type = form.transaction_type.data
    amount = form.amount.data

    if transaction_type == 'DISBURSEMENT':
        if loan.transactions.filter_by(transaction_type='DISBURSEMENT').first():
            return json_error('Loan already has a disbursement', 400)

        if amount != loan.principal:
            return json_error('Disbursement amount must match loan principal', 400)

    transaction = Transaction(loan=loan, transaction_type=transaction_type, amount=amount, date=form.date.data)
    db.session.add(transaction)
    db.session.flush()

    log_create(current_user.id, 'OTHER', transaction.id, f'Transaction for {loan.borrower.name}', {
        'loanId': loan.id,
        'transactionType': transaction_type,
        'amount': money_str(amount),
        'date': transaction.date.isoformat(),
    }, label='transaction')
    db.session.commit()

    return jsonify(transaction.to_dict()), 201

@transactions_bp.route('/<int:transaction_id>', methods=['GET'])
@login_required
def get_transaction(transaction_id):
    transaction = db.session.get(Transaction, transaction_id)
    if transaction is None:
        return json_error('Transaction not found', 404)
    return jsonify(transaction.to_dict())
