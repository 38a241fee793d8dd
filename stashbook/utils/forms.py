"""Form base classes for JSON request bodies"""
import re
from decimal import Decimal, InvalidOperation
from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import DecimalField


def json_formdata():
    """Turn a JSON object body into form data

    camelCase keys map to the snake_case field names. Nulls are dropped so
    the field counts as missing. Nested values are ignored. Booleans map to
    the strings WTForms understands.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    formdata = MultiDict()
    for key, value in payload.items():
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        formdata.add(_snake_case(key), str(value))
    return formdata


def _snake_case(name):
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class ApiForm(FlaskForm):
    """Form fed from a JSON body"""

    class Meta:
        csrf = False

    @classmethod
    def from_request(cls, **kwargs):
        return cls(formdata=json_formdata(), **kwargs)

    def provided(self, name):
        """True when the request body carried a value for the field"""
        return bool(self[name].raw_data)


class MoneyField(DecimalField):
    """Decimal field that never goes through float"""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        try:
            self.data = Decimal(str(valuelist[0]).strip().replace(',', ''))
        except (InvalidOperation, ValueError):
            self.data = None
            raise ValueError(self.gettext('Not a valid decimal value.'))
        if not self.data.is_finite():
            self.data = None
            raise ValueError(self.gettext('Not a valid decimal value.'))


# Accepted shapes for date inputs: plain dates and JS ISO timestamps
DATE_FORMATS = ['%Y-%m-%d', '%Y-%m-%dT%H:%M:%S.%fZ', '%Y-%m-%dT%H:%M:%SZ', '%Y-%m-%dT%H:%M:%S']
