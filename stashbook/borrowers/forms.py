"""Borrower forms"""
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional
from stashbook.utils.forms import ApiForm

class BorrowerForm(ApiForm):
    """Borrower create/update form"""
    name = StringField('Name', validators=[DataRequired(message='Name is required'), Length(max=200)])
    contact_info = StringField('Contact Info', validators=[Optional(), Length(max=255)])
