#!/usr/bin/env python3
"""
Validators of values typed by the user.

A field takes the raw line read from the user and returns the typed value
or raises FieldIsNotValidError, the session prompts again until the line is
valid.
"""

import datetime
import re
from decimal import Decimal, InvalidOperation


class FieldIsNotValidError(Exception):
    pass


class Field:
    """
    Base class of fields. A required field rejects blank line, an optional
    field returns None for blank line.
    """

    def __init__(self, is_required=True):
        self.is_required = is_required

    def valid(self, raw):
        if not raw.strip():
            if self.is_required:
                raise FieldIsNotValidError("can't be empty")
            return None
        return self.convert(raw)

    def convert(self, raw):
        return raw


class StrField(Field):
    """
    Valide if line is at most max_length characters.
    """

    def __init__(self, max_length=None, is_required=True):
        super().__init__(is_required)
        self.max_length = max_length

    def convert(self, raw):
        if self.max_length is not None and len(raw) > self.max_length:
            raise FieldIsNotValidError(
                "can't be longer than {} characters".format(self.max_length))
        return raw


class DigitsField(StrField):
    """
    String of digits such as phone number.
    """

    def convert(self, raw):
        value = super().convert(raw.strip())
        if not value.isdigit():
            raise FieldIsNotValidError("must contain digits only")
        return value


class IntField(Field):
    """
    Valide if line is int between min and max.
    By default min is minus infinity and max is infinity
    """

    def __init__(self, int_min=float("-inf"), int_max=float("+inf"), is_required=True):
        super().__init__(is_required)
        self.min = int_min
        self.max = int_max

    def convert(self, raw):
        try:
            value = int(raw)
        except ValueError:
            raise FieldIsNotValidError('must be an integer')
        if not self.max >= value >= self.min:
            msg = 'must be an integer between {s.min} and {s.max}'.format(s=self)
            raise FieldIsNotValidError(msg)
        return value


class DecimalField(Field):
    """
    Valide if line is decimal number between min and max with at most
    `places` digits after the decimal point.
    """

    def __init__(self, decimal_min, decimal_max, places=2, is_required=True):
        super().__init__(is_required)
        self.min = Decimal(decimal_min)
        self.max = Decimal(decimal_max)
        self.places = places

    def convert(self, raw):
        msg = 'must be a number between {s.min} and {s.max}'.format(s=self)
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            raise FieldIsNotValidError(msg)
        if not value.is_finite() or not self.max >= value >= self.min:
            raise FieldIsNotValidError(msg)
        if value.as_tuple().exponent < -self.places:
            raise FieldIsNotValidError(
                'must have at most {} digits after the decimal point'.format(self.places))
        return value.quantize(Decimal(1).scaleb(-self.places))


class DateField(Field):
    """
    Valide if line is a date written MM/DD/YY.
    """

    PATTERN = re.compile(r'^\d{2}/\d{2}/\d{2}$')
    FORMAT = '%m/%d/%y'
    DISPLAY = 'MM/DD/YY'

    def convert(self, raw):
        raw = raw.strip()
        if self.PATTERN.match(raw) is None:
            raise FieldIsNotValidError('must be a date formatted as {}'.format(self.DISPLAY))
        try:
            return datetime.datetime.strptime(raw, self.FORMAT).date()
        except ValueError:
            raise FieldIsNotValidError('{} is not a valid date'.format(raw))


class BoolField(Field):
    TRUE = ('true', 't', 'yes', 'y', '1')
    FALSE = ('false', 'f', 'no', 'n', '0')

    def convert(self, raw):
        value = raw.strip().lower()
        if value in self.TRUE:
            return True
        if value in self.FALSE:
            return False
        raise FieldIsNotValidError('must be true or false')


class ChoiceField(Field):
    """
    Valide if line is one of choices, case is ignored.
    """

    def __init__(self, choices, is_required=True):
        super().__init__(is_required)
        self.choices = choices

    def convert(self, raw):
        value = raw.strip().lower()
        for choice in self.choices:
            if choice.lower() == value:
                return choice
        raise FieldIsNotValidError('must be one of {}'.format(', '.join(self.choices)))
