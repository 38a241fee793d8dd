"""Repayment forms"""
from decimal import Decimal
from wtforms import DateField, IntegerField
from wtforms.validators import DataRequired, NumberRange, Optional
from stashbook.utils.forms import ApiForm, MoneyField, DATE_FORMATS

class RepaymentForm(ApiForm):
    """Manually scheduled installment"""
    loan_id = IntegerField('Loan', validators=[DataRequired(message='Missing required fields')])
    due_date = DateField('Due Date', format=DATE_FORMATS, validators=[DataRequired(message='Missing required fields')])
    amount_due = MoneyField('Amount Due', validators=[
        DataRequired(message='Missing required fields'),
        NumberRange(min=Decimal('0.01'), message='Amount due must be greater than 0')
    ])

class RepaymentUpdateForm(ApiForm):
    amount_due = MoneyField('Amount Due', validators=[
        Optional(), NumberRange(min=Decimal('0.01'), message='Amount due must be greater than 0')
    ])
    amount_paid = MoneyField('Amount Paid', validators=[
        Optional(), NumberRange(min=Decimal('0'), message='Amount paid cannot be negative')
    ])
    due_date = DateField('Due Date', format=DATE_FORMATS, validators=[Optional()])
    payment_date = DateField('Payment Date', format=DATE_FORMATS, validators=[Optional()])
