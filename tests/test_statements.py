#!/usr/bin/env python3

import sys
import os
import unittest
from datetime import date
from decimal import Decimal
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from hoteldb.db import DataBase
from hoteldb.statements import StatementBuilder, Statement
from hoteldb.sqltranslator import (MetaSQLTranslator, SqliteTranslator,
                                   PostgresqlTranslator, MysqlTranslator)
from hoteldb import schema


class TestSQLTranslator(unittest.TestCase):

    def test_providers(self):
        self.assertIs(MetaSQLTranslator.PROVIDERS['sqlite'], SqliteTranslator)
        self.assertIs(MetaSQLTranslator.PROVIDERS['postgresql'], PostgresqlTranslator)
        self.assertIs(MetaSQLTranslator.PROVIDERS['mysql'], MysqlTranslator)

    def test_insert_placeholders(self):
        self.assertEqual(SqliteTranslator.insert('Room', ('hotelID', 'roomNo')),
                         'INSERT INTO Room (hotelID, roomNo) VALUES (?, ?)')
        self.assertEqual(MysqlTranslator.insert('Booking', ('customer',), 'bID'),
                         'INSERT INTO Booking (customer) VALUES (%s)')

    def test_postgresql_returns_generated_key(self):
        self.assertEqual(PostgresqlTranslator.insert('Booking', ('customer',), 'bID'),
                         'INSERT INTO Booking (customer) VALUES (%s) RETURNING bID')
        self.assertEqual(PostgresqlTranslator.insert('Room', ('hotelID',)),
                         'INSERT INTO Room (hotelID) VALUES (%s)')

    def test_year(self):
        self.assertEqual(PostgresqlTranslator.year('R.repairDate'),
                         'EXTRACT(YEAR FROM R.repairDate)')

    def test_sqlite_adapt(self):
        self.assertEqual(SqliteTranslator.adapt((date(2020, 1, 5), Decimal('9.50'), 'a', 3)),
                         ('2020-01-05', '9.50', 'a', 3))

    def test_create_table(self):
        self.assertEqual(
            PostgresqlTranslator.create_table(schema.ASSIGNED),
            "CREATE TABLE IF NOT EXISTS Assigned (asgID SERIAL PRIMARY KEY, "
            "staffID INTEGER NOT NULL, hotelID INTEGER NOT NULL, roomNo INTEGER NOT NULL, "
            "FOREIGN KEY (hotelID, roomNo) REFERENCES Room(hotelID, roomNo))")
        self.assertEqual(
            SqliteTranslator.create_table(schema.ROOM),
            "CREATE TABLE IF NOT EXISTS Room (hotelID INTEGER NOT NULL, "
            "roomNo INTEGER NOT NULL, roomType VARCHAR(10) NULL, "
            "PRIMARY KEY (hotelID, roomNo))")

    def test_mysql_serial(self):
        self.assertEqual(MysqlTranslator.column_definition(schema.SerialColumn('bID')),
                         'bID INTEGER AUTO_INCREMENT PRIMARY KEY')


class TestStatementBuilder(unittest.TestCase):

    def setUp(self):
        self.builder = StatementBuilder(PostgresqlTranslator)

    def test_values_are_bound(self):
        statement = self.builder.build('insert_customer', {
            'fName': "O'Brien", 'lName': 'Smith', 'Address': "1 Main St",
            'phNo': '5551234', 'DOB': date(1990, 1, 13), 'gender': 'Male'})
        self.assertNotIn("O'Brien", statement.sql)
        self.assertEqual(statement.sql,
                         'INSERT INTO Customer (fName, lName, Address, phNo, DOB, gender) '
                         'VALUES (%s, %s, %s, %s, %s, %s) RETURNING customerID')
        self.assertEqual(statement.parameters,
                         ("O'Brien", 'Smith', '1 Main St', '5551234', date(1990, 1, 13), 'Male'))
        self.assertEqual(statement.generated_key, 'customerID')

    def test_missing_value(self):
        with self.assertRaises(KeyError):
            self.builder.build('insert_room', {'hotelID': 1, 'roomNo': 101})

    def test_value_named_like_an_operation_argument(self):
        statement = self.builder.build('insert_maintenance_company', {
            'name': 'FixIt', 'address': '3 Elm St', 'isCertified': True})
        self.assertEqual(statement.parameters, ('FixIt', '3 Elm St', True))
        self.assertEqual(statement.generated_key, 'cmpID')

        statement = self.builder.build('repairs_by_company', {'name': 'FixIt'})
        self.assertEqual(statement.parameters, ('FixIt',))

    def test_table_without_generated_key(self):
        statement = self.builder.build('insert_room',
                                       {'hotelID': 1, 'roomNo': 101, 'roomType': 'Suite'})
        self.assertIsNone(statement.generated_key)
        self.assertNotIn('RETURNING', statement.sql)

    def test_unknown_operation(self):
        with self.assertRaises(ValueError):
            self.builder.build('drop_everything', {})

    def test_exists(self):
        self.assertEqual(self.builder.exists('Room', hotelID=1, roomNo=101),
                         Statement('SELECT 1 FROM Room WHERE hotelID = %s AND roomNo = %s',
                                   (1, 101)))

    def test_week_availability_window(self):
        statement = self.builder.build('week_availability',
                                       {'hotelID': 1, 'date': date(2020, 12, 28)})
        self.assertEqual(statement.parameters, (1, date(2020, 12, 28), date(2021, 1, 3)))


class TestReports(unittest.TestCase):

    def setUp(self):
        self.db = DataBase('sqlite', database=':memory:')
        self.db.connect()
        self.builder = StatementBuilder(self.db.sql_translator)
        for statement in self.builder.create_tables():
            self.db.execute_mutation(statement)

        for hotel_id, room_no, room_type in ((1, 101, 'Suite'),
                                             (1, 102, 'Single'),
                                             (1, 103, 'Double'),
                                             (2, 201, 'Suite')):
            self.insert('insert_room', hotelID=hotel_id, roomNo=room_no, roomType=room_type)

        self.john = self.insert('insert_customer', fName='John', lName='Smith',
                                Address='1 Main St', phNo='5551234',
                                DOB=date(1980, 5, 2), gender='Male')
        self.ann = self.insert('insert_customer', fName='Ann', lName='Lee',
                               Address='2 Oak St', phNo='5554321',
                               DOB=date(1985, 7, 9), gender='Female')

        for customer, hotel_id, room_no, booking_date, price in (
                (self.john, 1, 102, date(2020, 1, 5), '120.00'),
                (self.john, 1, 103, date(2020, 1, 20), '300.00'),
                (self.ann, 1, 102, date(2020, 1, 25), '250.00'),
                (self.ann, 2, 201, date(2020, 2, 10), '400.00'),
                (self.john, 1, 103, date(2020, 2, 15), '80.00')):
            self.book(customer, hotel_id, room_no, booking_date, price)

        self.fixit = self.insert('insert_maintenance_company', name='FixIt',
                                 address='3 Elm St', isCertified=True)
        self.pipes = self.insert('insert_maintenance_company', name='Pipes',
                                 address='4 Pine St', isCertified=False)

        for hotel_id, room_no, company, repair_date in (
                (1, 101, self.fixit, date(2019, 3, 4)),
                (1, 101, self.pipes, date(2020, 6, 1)),
                (1, 101, self.fixit, date(2019, 11, 20)),
                (2, 201, self.pipes, date(2020, 1, 1)),
                (2, 201, self.pipes, date(2021, 1, 1))):
            self.insert('insert_repair', hotelID=hotel_id, roomNo=room_no, mCompany=company,
                        repairDate=repair_date, description='leak', repairType='plumbing')

    def tearDown(self):
        self.db.close()

    def insert(self, operation, **values):
        return self.db.execute_mutation(self.builder.build(operation, values))

    def book(self, customer, hotel_id, room_no, booking_date, price, people=2):
        return self.insert('insert_booking', customer=customer, hotelID=hotel_id,
                           roomNo=room_no, bookingDate=booking_date, noOfPeople=people,
                           price=Decimal(price))

    def report(self, operation, **values):
        result = self.db.execute_query(self.builder.build(operation, values))
        return result.column_names, list(result)

    def test_generated_keys(self):
        self.assertEqual((self.john, self.ann), (1, 2))
        self.assertEqual((self.fixit, self.pipes), (1, 2))
        self.assertIsNone(self.insert('insert_room', hotelID=3, roomNo=301, roomType='Suite'))

    def test_available_rooms(self):
        columns, rows = self.report('available_rooms', hotelID=1)
        self.assertEqual(columns, ('roomNo', 'roomType'))
        self.assertEqual(rows, [(101, 'Suite')])

        self.assertEqual(self.report('available_rooms', hotelID=2)[1], [])

    def test_available_rooms_is_set_difference(self):
        _, rooms = self.report('available_rooms', hotelID=1)
        room_numbers = {row[0] for row in list(self.db.execute_query(
            Statement("SELECT roomNo FROM Room WHERE hotelID = ?", (1,))))}
        booked = {row[0] for row in list(self.db.execute_query(
            Statement("SELECT roomNo FROM Booking WHERE hotelID = ?", (1,))))}
        self.assertEqual({row[0] for row in rooms}, room_numbers - booked)

    def test_new_room_is_available_until_booked(self):
        self.insert('insert_room', hotelID=3, roomNo=101, roomType='Suite')
        self.assertEqual(self.report('available_rooms', hotelID=3)[1], [(101, 'Suite')])

        self.book(self.ann, 3, 101, date(2020, 3, 1), '99.99')
        self.assertEqual(self.report('available_rooms', hotelID=3)[1], [])

    def test_booked_rooms(self):
        self.assertEqual(self.report('booked_rooms', hotelID=1), (('bookedRooms',), [(4,)]))
        self.assertEqual(self.report('booked_rooms', hotelID=9)[1], [(0,)])

    def test_week_availability(self):
        _, rows = self.report('week_availability', hotelID=1, date=date(2020, 1, 1))
        self.assertEqual(rows, [(101, 'Suite'), (103, 'Double')])

        # the 7th day of the window is included
        _, rows = self.report('week_availability', hotelID=1, date=date(2020, 1, 14))
        self.assertEqual(rows, [(101, 'Suite'), (102, 'Single')])

        _, rows = self.report('week_availability', hotelID=1, date=date(2020, 1, 21))
        self.assertEqual(rows, [(101, 'Suite'), (103, 'Double')])

    def test_top_k_price_by_date_range(self):
        start, end = date(2020, 1, 1), date(2020, 1, 31)
        columns, rows = self.report('top_k_price_by_date_range', start=start, end=end, k=3)
        self.assertEqual(columns, ('bID', 'hotelID', 'roomNo', 'bookingDate', 'price'))
        self.assertEqual(len(rows), 3)
        self.assertEqual([float(row[4]) for row in rows], [300.0, 250.0, 120.0])
        for row in rows:
            self.assertTrue(start.isoformat() <= row[3] <= end.isoformat())

        _, rows = self.report('top_k_price_by_date_range', start=start, end=end, k=2)
        self.assertEqual([row[0] for row in rows], [2, 3])

    def test_top_k_ties_are_ordered_by_booking(self):
        first = self.book(self.ann, 2, 201, date(2020, 1, 10), '300.00')
        columns, rows = self.report('top_k_price_by_date_range',
                                    start=date(2020, 1, 1), end=date(2020, 1, 31), k=2)
        self.assertEqual([row[0] for row in rows], [2, first])

    def test_top_k_price_for_customer(self):
        _, rows = self.report('top_k_price_for_customer', fName='John', lName='Smith', k=2)
        self.assertEqual([float(row[4]) for row in rows], [300.0, 120.0])

        _, rows = self.report('top_k_price_for_customer', fName='John', lName='Doe', k=2)
        self.assertEqual(rows, [])

    def test_total_cost_for_customer(self):
        columns, rows = self.report('total_cost_for_customer', hotelID=1, fName='John',
                                    lName='Smith', start=date(2020, 1, 1), end=date(2020, 1, 31))
        self.assertEqual(columns, ('totalCost',))
        self.assertAlmostEqual(float(rows[0][0]), 420.0)

        _, rows = self.report('total_cost_for_customer', hotelID=1, fName='John',
                              lName='Smith', start=date(2020, 1, 1), end=date(2020, 12, 31))
        self.assertAlmostEqual(float(rows[0][0]), 500.0)

    def test_total_cost_without_booking_is_zero(self):
        _, rows = self.report('total_cost_for_customer', hotelID=2, fName='John',
                              lName='Smith', start=date(2020, 1, 1), end=date(2020, 12, 31))
        self.assertEqual(rows, [(0,)])

    def test_repairs_by_company(self):
        columns, rows = self.report('repairs_by_company', name='FixIt')
        self.assertEqual(columns, ('rID', 'repairType', 'hotelID', 'roomNo', 'repairDate'))
        self.assertEqual(rows, [(1, 'plumbing', 1, 101, '2019-03-04'),
                                (3, 'plumbing', 1, 101, '2019-11-20')])

        self.assertEqual(self.report('repairs_by_company', name='Nobody')[1], [])

    def test_top_k_companies_by_repair_count(self):
        columns, rows = self.report('top_k_companies_by_repair_count', k=5)
        self.assertEqual(columns, ('cmpID', 'name', 'repairCount'))
        self.assertEqual(rows, [(self.pipes, 'Pipes', 3), (self.fixit, 'FixIt', 2)])

        self.assertEqual(self.report('top_k_companies_by_repair_count', k=1)[1],
                         [(self.pipes, 'Pipes', 3)])

    def test_repairs_per_year(self):
        columns, rows = self.report('repairs_per_year', hotelID=1, roomNo=101)
        self.assertEqual(columns, ('repairYear', 'repairCount'))
        self.assertEqual(rows, [(2019, 2), (2020, 1)])

        self.assertEqual(self.report('repairs_per_year', hotelID=2, roomNo=201)[1],
                         [(2020, 1), (2021, 1)])
        self.assertEqual(self.report('repairs_per_year', hotelID=1, roomNo=102)[1], [])


if __name__ == '__main__':
    unittest.main()
