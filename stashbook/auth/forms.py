"""Authentication forms"""
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Email, Length, Optional
from stashbook.utils.forms import ApiForm

class LoginForm(ApiForm):
    """Login form"""
    email = StringField('Email', validators=[DataRequired(message='Email and password are required')])
    password = PasswordField('Password', validators=[DataRequired(message='Email and password are required')])
    remember_me = BooleanField('Remember Me')

class RegistrationForm(ApiForm):
    """Self-service registration form"""
    email = StringField('Email', validators=[
        DataRequired(message='Email and password are required'),
        Email(message='Invalid email format'),
        Length(max=120)
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Email and password are required'),
        Length(min=6, message='Password must be at least 6 characters long')
    ])
    first_name = StringField('First Name', validators=[Optional(), Length(max=100)])
    last_name = StringField('Last Name', validators=[Optional(), Length(max=100)])
