#!/usr/bin/env python3
"""
Relations used by the console.

The tables are normally provided by the engine. StatementBuilder.create_tables
creates the missing ones on an empty database, it never alters an existing table.
"""


class Column:
    def __init__(self, name, nullable=False):
        self.name = name
        self.nullable = nullable


class SerialColumn(Column):
    """
    Integer key generated by the engine.
    """


class IntegerColumn(Column):
    pass


class StringColumn(Column):
    def __init__(self, name, length, nullable=False):
        super().__init__(name, nullable)
        self.length = length


class ChoiceColumn(StringColumn):
    pass


class TextColumn(Column):
    pass


class DateColumn(Column):
    pass


class NumericColumn(Column):
    def __init__(self, name, precision, scale, nullable=False):
        super().__init__(name, nullable)
        self.precision = precision
        self.scale = scale


class BooleanColumn(Column):
    pass


class ForeignKey:
    def __init__(self, fields, referenced_table, referenced_fields=None):
        self.fields = fields
        self.referenced_table = referenced_table
        self.referenced_fields = referenced_fields or fields


class Table:
    def __init__(self, name, columns, primary_key=(), foreign_keys=()):
        self.name = name
        self.columns = columns
        self.primary_key = primary_key
        self.foreign_keys = foreign_keys

    @property
    def generated_key(self):
        for column in self.columns:
            if isinstance(column, SerialColumn):
                return column.name
        return None


CUSTOMER = Table('Customer', [
    SerialColumn('customerID'),
    StringColumn('fName', 30),
    StringColumn('lName', 30),
    TextColumn('Address', nullable=True),
    StringColumn('phNo', 15, nullable=True),
    DateColumn('DOB', nullable=True),
    ChoiceColumn('gender', 6, nullable=True),
])

ROOM = Table('Room', [
    IntegerColumn('hotelID'),
    IntegerColumn('roomNo'),
    StringColumn('roomType', 10, nullable=True),
], primary_key=('hotelID', 'roomNo'))

MAINTENANCE_COMPANY = Table('MaintenanceCompany', [
    SerialColumn('cmpID'),
    StringColumn('name', 30),
    TextColumn('address', nullable=True),
    BooleanColumn('isCertified'),
])

REPAIR = Table('Repair', [
    SerialColumn('rID'),
    IntegerColumn('hotelID'),
    IntegerColumn('roomNo'),
    IntegerColumn('mCompany'),
    DateColumn('repairDate'),
    TextColumn('description', nullable=True),
    StringColumn('repairType', 10, nullable=True),
], foreign_keys=(
    ForeignKey(('hotelID', 'roomNo'), 'Room'),
    ForeignKey(('mCompany',), 'MaintenanceCompany', ('cmpID',)),
))

BOOKING = Table('Booking', [
    SerialColumn('bID'),
    IntegerColumn('customer'),
    IntegerColumn('hotelID'),
    IntegerColumn('roomNo'),
    DateColumn('bookingDate'),
    IntegerColumn('noOfPeople', nullable=True),
    NumericColumn('price', 6, 2),
], foreign_keys=(
    ForeignKey(('customer',), 'Customer', ('customerID',)),
    ForeignKey(('hotelID', 'roomNo'), 'Room'),
))

ASSIGNED = Table('Assigned', [
    SerialColumn('asgID'),
    IntegerColumn('staffID'),
    IntegerColumn('hotelID'),
    IntegerColumn('roomNo'),
], foreign_keys=(
    ForeignKey(('hotelID', 'roomNo'), 'Room'),
))

REQUEST = Table('Request', [
    SerialColumn('reqID'),
    IntegerColumn('managerID'),
    IntegerColumn('repairID'),
    DateColumn('requestDate'),
    TextColumn('description', nullable=True),
], foreign_keys=(
    ForeignKey(('repairID',), 'Repair', ('rID',)),
))

# Referenced tables come first.
TABLES = (CUSTOMER, ROOM, MAINTENANCE_COMPANY, REPAIR, BOOKING, ASSIGNED, REQUEST)
