"""User management forms"""
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email, Length, Optional
from stashbook.utils.forms import ApiForm

class UserCreateForm(ApiForm):
    """Account created directly by a superadmin"""
    email = StringField('Email', validators=[
        DataRequired(message='Missing required fields'),
        Email(message='Invalid email format'),
        Length(max=120)
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Missing required fields'),
        Length(min=6, message='Password must be at least 6 characters long')
    ])
    first_name = StringField('First Name', validators=[Optional(), Length(max=100)])
    last_name = StringField('Last Name', validators=[Optional(), Length(max=100)])
    role = StringField('Role', validators=[Optional()])
    status = StringField('Status', validators=[Optional()])

class UserUpdateForm(ApiForm):
    first_name = StringField('First Name', validators=[Optional(), Length(max=100)])
    last_name = StringField('Last Name', validators=[Optional(), Length(max=100)])

class RoleForm(ApiForm):
    role = StringField('Role', validators=[DataRequired(message='Invalid role')])

class StatusForm(ApiForm):
    status = StringField('Status', validators=[DataRequired(message='Invalid status')])
