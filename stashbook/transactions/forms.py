"""Transaction forms"""
from decimal import Decimal
from wtforms import DateField, IntegerField, StringField
from wtforms.validators import AnyOf, DataRequired, NumberRange
from stashbook.models import TRANSACTION_TYPES
from stashbook.utils.forms import ApiForm, MoneyField, DATE_FORMATS

class TransactionForm(ApiForm):
    loan_id = IntegerField('Loan', validators=[DataRequired(message='Missing required fields')])
    transaction_type = StringField('Type', validators=[
        DataRequired(message='Missing required fields'),
        AnyOf(TRANSACTION_TYPES, message='Invalid transaction type')
    ])
    amount = MoneyField('Amount', validators=[
        DataRequired(message='Missing required fields'),
        NumberRange(min=Decimal('0.01'), message='Amount must be greater than 0')
    ])
    date = DateField('Date', format=DATE_FORMATS, validators=[DataRequired(message='Missing required fields')])
