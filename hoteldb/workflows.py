#!/usr/bin/env python3
"""
Console workflows. Each workflow prompts the values it needs, builds one
statement and submits it with the session database.

Errors of the database are not handled here, the console catches them and
goes back to the menu.
"""

import logging

from .db import IntegrityError
from .fields import (StrField, DigitsField, IntField, DecimalField, DateField,
                     BoolField, ChoiceField)
from .render import render


_logger = logging.getLogger(__name__)


class MissingReferenceError(IntegrityError):
    """
    Raised before insert when a referenced row doesn't exist.
    """


def date_label(text):
    return '{} ({}): '.format(text, DateField.DISPLAY)


HOTEL_ID = ('hotelID', 'Input the Hotel ID: ', IntField(int_min=0))
ROOM_NO = ('roomNo', 'Input the Room Number: ', IntField(int_min=0))
FIRST_NAME = ('fName', 'Input the First Name: ', StrField(max_length=30))
LAST_NAME = ('lName', 'Input the Last Name: ', StrField(max_length=30))
K = ('k', 'Input the value of K: ', IntField(int_min=1))
START = ('start', date_label('Input the start date'), DateField())
END = ('end', date_label('Input the end date'), DateField())

CUSTOMER_FIELDS = (
    FIRST_NAME,
    LAST_NAME,
    ('Address', 'Input the Address: ', StrField()),
    ('phNo', 'Input the Phone Number (digits only): ', DigitsField(max_length=15)),
    ('DOB', date_label('Input the Date of Birth'), DateField()),
    ('gender', 'Input the Gender (Male, Female, Other): ',
     ChoiceField(('Male', 'Female', 'Other'))),
)

ROOM_FIELDS = (
    HOTEL_ID,
    ROOM_NO,
    ('roomType', 'Input the Room Type: ', StrField(max_length=10)),
)

MAINTENANCE_COMPANY_FIELDS = (
    ('name', 'Input the Company Name: ', StrField(max_length=30)),
    ('address', 'Input the Company Address: ', StrField()),
    ('isCertified', 'Is the Company Certified? (yes/no): ', BoolField()),
)

REPAIR_FIELDS = (
    HOTEL_ID,
    ROOM_NO,
    ('mCompany', 'Input the Maintenance Company ID: ', IntField(int_min=0)),
    ('repairDate', date_label('Input the Repair Date'), DateField()),
    ('description', 'Input the Repair Description: ', StrField()),
    ('repairType', 'Input the Repair Type: ', StrField(max_length=10)),
)

BOOKING_FIELDS = (
    ('customer', 'Input the Customer ID: ', IntField(int_min=0)),
    HOTEL_ID,
    ROOM_NO,
    ('bookingDate', date_label('Input the Booking Date'), DateField()),
    ('noOfPeople', 'Input the number of people: ', IntField(int_min=1)),
    ('price', 'Input the Price: $ ', DecimalField(0, '9999.99')),
)

ASSIGN_STAFF_FIELDS = (
    ('staffID', 'Input the Staff SSN: ', IntField(int_min=0)),
    HOTEL_ID,
    ROOM_NO,
)

REPAIR_REQUEST_FIELDS = (
    ('managerID', 'Input the Manager ID: ', IntField(int_min=0)),
    ('repairID', 'Input the Repair ID: ', IntField(int_min=0)),
    ('requestDate', date_label('Input the Request Date'), DateField()),
    ('description', 'Input the Request Description: ', StrField()),
)

ROOM_REFERENCE = ('Room', {'hotelID': 'hotelID', 'roomNo': 'roomNo'})

# mutation: ((referenced table, {referenced column: value name}), ...)
REFERENCES = {
    'insert_repair': (ROOM_REFERENCE,
                      ('MaintenanceCompany', {'cmpID': 'mCompany'})),
    'insert_booking': (('Customer', {'customerID': 'customer'}),
                       ROOM_REFERENCE),
    'assign_staff': (ROOM_REFERENCE,),
    'request_repair': (('Repair', {'rID': 'repairID'}),),
}


def check_references(session, name, values):
    """
    Raise MissingReferenceError if a row referenced by values doesn't exist.
    """
    for table_name, columns in REFERENCES.get(name, ()):
        criteria = {column: values[value_name] for column, value_name in columns.items()}
        rows = list(session.database.execute_query(
            session.builder.exists(table_name, **criteria)))
        if not rows:
            description = ', '.join('{}={}'.format(k, v) for k, v in criteria.items())
            raise MissingReferenceError(
                "{} ({}) doesn't exist".format(table_name, description))


def insert(session, name, fields, label):
    values = session.collect(fields)
    check_references(session, name, values)
    key = session.database.execute_mutation(session.builder.build(name, values))
    _logger.info("%s done, generated key %s", name, key)
    if key is None:
        session.print("{} added.".format(label))
    else:
        session.print("{} {} added.".format(label, key))
    return key


def report(session, name, fields):
    values = session.collect(fields)
    result = session.database.execute_query(session.builder.build(name, values))
    return render(result, session.stdout)


def add_customer(session):
    return insert(session, 'insert_customer', CUSTOMER_FIELDS, 'Customer')


def add_room(session):
    return insert(session, 'insert_room', ROOM_FIELDS, 'Room')


def add_maintenance_company(session):
    return insert(session, 'insert_maintenance_company', MAINTENANCE_COMPANY_FIELDS,
                  'Maintenance company')


def add_repair(session):
    return insert(session, 'insert_repair', REPAIR_FIELDS, 'Repair')


def book_room(session):
    return insert(session, 'insert_booking', BOOKING_FIELDS, 'Booking')


def assign_house_cleaning_to_room(session):
    return insert(session, 'assign_staff', ASSIGN_STAFF_FIELDS, 'Assignment')


def repair_request(session):
    return insert(session, 'request_repair', REPAIR_REQUEST_FIELDS, 'Repair request')


def available_rooms(session):
    return report(session, 'available_rooms', (HOTEL_ID,))


def booked_rooms(session):
    return report(session, 'booked_rooms', (HOTEL_ID,))


def week_availability(session):
    return report(session, 'week_availability', (
        HOTEL_ID,
        ('date', date_label('Input the first day of the week'), DateField()),
    ))


def top_k_price_by_date_range(session):
    return report(session, 'top_k_price_by_date_range', (START, END, K))


def top_k_price_for_customer(session):
    return report(session, 'top_k_price_for_customer', (FIRST_NAME, LAST_NAME, K))


def total_cost_for_customer(session):
    return report(session, 'total_cost_for_customer',
                  (HOTEL_ID, FIRST_NAME, LAST_NAME, START, END))


def repairs_by_company(session):
    return report(session, 'repairs_by_company', (
        ('name', 'Input the Maintenance Company Name: ', StrField(max_length=30)),
    ))


def top_k_companies_by_repair_count(session):
    return report(session, 'top_k_companies_by_repair_count', (K,))


def repairs_per_year(session):
    return report(session, 'repairs_per_year', (HOTEL_ID, ROOM_NO))
