#!/usr/bin/env python3
"""
Statements submitted to the engine.

Every value is sent as a bound parameter, the SQL text only contains
placeholders given by the SQL translator of the provider.
"""

from collections import namedtuple
import datetime

from . import schema


Statement = namedtuple('Statement', ('sql', 'parameters', 'generated_key'))
Statement.__new__.__defaults__ = ((), None)

WEEK = datetime.timedelta(days=6)

# name: (table, fields in statement order)
MUTATIONS = {
    'insert_customer': (schema.CUSTOMER,
                        ('fName', 'lName', 'Address', 'phNo', 'DOB', 'gender')),
    'insert_room': (schema.ROOM,
                    ('hotelID', 'roomNo', 'roomType')),
    'insert_maintenance_company': (schema.MAINTENANCE_COMPANY,
                                   ('name', 'address', 'isCertified')),
    'insert_repair': (schema.REPAIR,
                      ('hotelID', 'roomNo', 'mCompany', 'repairDate', 'description', 'repairType')),
    'insert_booking': (schema.BOOKING,
                       ('customer', 'hotelID', 'roomNo', 'bookingDate', 'noOfPeople', 'price')),
    'assign_staff': (schema.ASSIGNED,
                     ('staffID', 'hotelID', 'roomNo')),
    'request_repair': (schema.REQUEST,
                       ('managerID', 'repairID', 'requestDate', 'description')),
}

ROOMS_WITHOUT_BOOKING = (
    "SELECT R.roomNo, R.roomType FROM Room R "
    "WHERE R.hotelID = {p} "
    "AND NOT EXISTS (SELECT 1 FROM Booking B "
    "WHERE B.hotelID = R.hotelID AND B.roomNo = R.roomNo{period}) "
    "ORDER BY R.roomNo")

BOOKING_COLUMNS = "B.bID, B.hotelID, B.roomNo, B.bookingDate, B.price"


class StatementBuilder:
    """
    Build the statement of each console operation for one SQL translator.

    build(operation, values) returns the statement of the named operation,
    values is a dict of field name to converted value.
    """

    def __init__(self, sql_translator):
        self.translator = sql_translator
        self.p = sql_translator.PLACEHOLDER

    def build(self, operation, values):
        if operation in MUTATIONS:
            return self.mutation(operation, values)
        if operation not in self.REPORTS:
            raise ValueError("unknown operation '{}'".format(operation))
        return getattr(self, operation)(**values)

    def mutation(self, operation, values):
        """
        INSERT statement of a mutation template. values must contain every
        field of the template, missing fields raise KeyError.
        """
        table, field_names = MUTATIONS[operation]
        sql = self.translator.insert(table.name, field_names, table.generated_key)
        return Statement(sql, tuple(values[field_name] for field_name in field_names),
                         table.generated_key)

    def exists(self, table_name, **criteria):
        sql = self.translator.exists(table_name, list(criteria))
        return Statement(sql, tuple(criteria.values()))

    def create_tables(self, tables=schema.TABLES):
        return [Statement(self.translator.create_table(table)) for table in tables]

    # Reports

    def available_rooms(self, hotelID):
        sql = ROOMS_WITHOUT_BOOKING.format(p=self.p, period="")
        return Statement(sql, (hotelID,))

    def booked_rooms(self, hotelID):
        sql = "SELECT COUNT(*) AS bookedRooms FROM Booking WHERE hotelID = {p}".format(p=self.p)
        return Statement(sql, (hotelID,))

    def week_availability(self, hotelID, date):
        """
        Rooms without booking between date and date + 6 days, both included.
        """
        period = " AND B.bookingDate BETWEEN {p} AND {p}".format(p=self.p)
        sql = ROOMS_WITHOUT_BOOKING.format(p=self.p, period=period)
        return Statement(sql, (hotelID, date, date + WEEK))

    def top_k_price_by_date_range(self, start, end, k):
        sql = ("SELECT {columns} FROM Booking B "
               "WHERE B.bookingDate BETWEEN {p} AND {p} "
               "ORDER BY B.price DESC, B.bID "
               "LIMIT {p}").format(columns=BOOKING_COLUMNS, p=self.p)
        return Statement(sql, (start, end, k))

    def top_k_price_for_customer(self, fName, lName, k):
        sql = ("SELECT {columns} FROM Booking B "
               "INNER JOIN Customer C ON C.customerID = B.customer "
               "WHERE C.fName = {p} AND C.lName = {p} "
               "ORDER BY B.price DESC, B.bID "
               "LIMIT {p}").format(columns=BOOKING_COLUMNS, p=self.p)
        return Statement(sql, (fName, lName, k))

    def total_cost_for_customer(self, hotelID, fName, lName, start, end):
        sql = ("SELECT COALESCE(SUM(B.price), 0) AS totalCost FROM Booking B "
               "INNER JOIN Customer C ON C.customerID = B.customer "
               "WHERE B.hotelID = {p} AND C.fName = {p} AND C.lName = {p} "
               "AND B.bookingDate BETWEEN {p} AND {p}").format(p=self.p)
        return Statement(sql, (hotelID, fName, lName, start, end))

    def repairs_by_company(self, name):
        sql = ("SELECT R.rID, R.repairType, R.hotelID, R.roomNo, R.repairDate "
               "FROM Repair R "
               "INNER JOIN MaintenanceCompany M ON M.cmpID = R.mCompany "
               "WHERE M.name = {p} "
               "ORDER BY R.rID").format(p=self.p)
        return Statement(sql, (name,))

    def top_k_companies_by_repair_count(self, k):
        sql = ("SELECT M.cmpID, M.name, RC.repairCount FROM MaintenanceCompany M "
               "INNER JOIN (SELECT mCompany, COUNT(*) AS repairCount "
               "FROM Repair GROUP BY mCompany) RC ON RC.mCompany = M.cmpID "
               "ORDER BY RC.repairCount DESC, M.cmpID "
               "LIMIT {p}").format(p=self.p)
        return Statement(sql, (k,))

    def repairs_per_year(self, hotelID, roomNo):
        sql = ("SELECT {year} AS repairYear, COUNT(*) AS repairCount FROM Repair R "
               "WHERE R.hotelID = {p} AND R.roomNo = {p} "
               "GROUP BY {year} "
               "ORDER BY repairYear").format(year=self.translator.year('R.repairDate'),
                                            p=self.p)
        return Statement(sql, (hotelID, roomNo))

    REPORTS = ('available_rooms',
               'booked_rooms',
               'week_availability',
               'top_k_price_by_date_range',
               'top_k_price_for_customer',
               'total_cost_for_customer',
               'repairs_by_company',
               'top_k_companies_by_repair_count',
               'repairs_per_year')
