"""Dashboard routes"""
from flask import jsonify, current_app
from stashbook.dashboard import dashboard_bp
from stashbook.models import Stash, Loan, Repayment
from stashbook.utils.decorators import login_required
from stashbook.utils.finance import summarize, format_currency, format_compact

@dashboard_bp.route('/financial-summary')
@login_required
def financial_summary():
    """Cash position of the pool, recomputed on every request"""
    summary = summarize(
        Stash.query.all(),
        Loan.query.all(),
        Repayment.query.all()
    )

    currency = current_app.config['DEFAULT_CURRENCY']
    payload = summary.to_dict()
    payload['currency'] = currency
    payload['formatted'] = {
        key: format_currency(getattr(summary, field), currency)
        for key, field in (
            ('totalContributions', 'total_contributions'),
            ('totalLoans', 'total_loans'),
            ('totalRepayments', 'total_repayments'),
            ('amountOnHand', 'amount_on_hand'),
        )
    }
    payload['compact'] = {
        'amountOnHand': format_compact(summary.amount_on_hand, currency)
    }
    return jsonify(payload)
