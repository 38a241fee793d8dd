"""Stash contribution forms"""
from decimal import Decimal
from wtforms import DateField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, NumberRange, Optional
from stashbook.utils.forms import ApiForm, MoneyField, DATE_FORMATS

class StashForm(ApiForm):
    """Monthly contribution form"""
    owner_id = IntegerField('Owner', validators=[DataRequired(message='Owner ID, month, and amount are required')])
    month = DateField('Month', format=DATE_FORMATS,
                      validators=[DataRequired(message='Owner ID, month, and amount are required')])
    amount = MoneyField('Amount', validators=[
        DataRequired(message='Owner ID, month, and amount are required'),
        NumberRange(min=Decimal('0.01'), message='Amount must be greater than 0')
    ])
    remarks = TextAreaField('Remarks', validators=[Optional()])
