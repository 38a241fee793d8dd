"""Loan forms"""
from wtforms import DateField, IntegerField, StringField
from wtforms.validators import AnyOf, DataRequired, InputRequired, Optional
from stashbook.models import LOAN_STATUSES
from stashbook.utils.forms import ApiForm, MoneyField, DATE_FORMATS

MISSING_LOAN_FIELDS = ('Missing required fields: borrowerId, principal, interestRate, '
                       'startDate, and maturityDate are required')

class LoanForm(ApiForm):
    """New loan form"""
    borrower_id = IntegerField('Borrower', validators=[DataRequired(message=MISSING_LOAN_FIELDS)])
    principal = MoneyField('Principal', validators=[InputRequired(message=MISSING_LOAN_FIELDS)])
    interest_rate = MoneyField('Interest Rate (%)', validators=[InputRequired(message=MISSING_LOAN_FIELDS)])
    start_date = DateField('Start Date', format=DATE_FORMATS,
                           validators=[DataRequired(message=MISSING_LOAN_FIELDS)])
    maturity_date = DateField('Maturity Date', format=DATE_FORMATS,
                              validators=[DataRequired(message=MISSING_LOAN_FIELDS)])

class LoanUpdateForm(ApiForm):
    """Partial loan update; absent fields are left alone"""
    interest_rate = MoneyField('Interest Rate (%)', validators=[Optional()])
    maturity_date = DateField('Maturity Date', format=DATE_FORMATS, validators=[Optional()])
    status = StringField('Status', validators=[Optional(), AnyOf(LOAN_STATUSES, message='Invalid loan status')])
