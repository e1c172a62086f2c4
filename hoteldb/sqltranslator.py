#!/usr/bin/env python3

import datetime
from decimal import Decimal


class MetaSQLTranslator(type):
    """
    Store SQL translators in PROVIDERS attribute. The key of PROVIDERS is
    lower-case class name without Translator suffix

    i.e: SqliteTranslator --> sqlite
    """

    PROVIDERS = {}

    def __init__(cls, name, bases, attrs):
        if name != 'SQLTranslator':
            if not name.endswith('Translator'):
                raise ValueError("{} class name must end with by '{}'"
                                 .format(cls, 'Translator'))
            type(cls).PROVIDERS[name[:-len('Translator')].lower()] = cls


class SQLTranslator(metaclass=MetaSQLTranslator):
    """
    Dialect details needed to build statements.

    PLACEHOLDER is the bound parameter marker of the driver paramstyle.
    """

    PLACEHOLDER = '%s'

    @classmethod
    def placeholders(cls, count):
        return ', '.join([cls.PLACEHOLDER] * count)

    @classmethod
    def where(cls, field_names):
        return " AND ".join(
            "{} = {}".format(field_name, cls.PLACEHOLDER) for field_name in field_names)

    @classmethod
    def insert(cls, table_name, field_names, generated_key=None):
        return ('INSERT INTO {} ({}) VALUES ({})'
                .format(table_name, ', '.join(field_names),
                        cls.placeholders(len(field_names))))

    @classmethod
    def exists(cls, table_name, field_names):
        return "SELECT 1 FROM {} WHERE {}".format(table_name, cls.where(field_names))

    @staticmethod
    def year(expression):
        return "EXTRACT(YEAR FROM {})".format(expression)

    @staticmethod
    def adapt(parameters):
        return tuple(parameters)

    @classmethod
    def create_table(cls, table):
        definitions = [cls.column_definition(column) for column in table.columns]
        if table.primary_key:
            definitions.append("PRIMARY KEY ({})".format(", ".join(table.primary_key)))
        for fk in table.foreign_keys:
            definitions.append(cls.foreign_key(fk))
        return "CREATE TABLE IF NOT EXISTS {} ({})".format(table.name, ", ".join(definitions))

    @staticmethod
    def foreign_key(fk):
        return "FOREIGN KEY ({}) REFERENCES {}({})".format(
            ", ".join(fk.fields), fk.referenced_table, ", ".join(fk.referenced_fields))

    @classmethod
    def column_definition(cls, column):
        column_cls_name = type(column).__name__
        mth_name = "".join(('_' + e.lower() if e.isupper() else e
                           for e in column_cls_name)).lstrip('_')

        values = dict(vars(column))
        if column.nullable:
            values['null'] = 'NULL'
        else:
            values['null'] = 'NOT NULL'
        return getattr(cls, mth_name)(column).format(**values).strip()

    @staticmethod
    def serial_column(column):
        return '{name} SERIAL PRIMARY KEY'

    @staticmethod
    def integer_column(column):
        return '{name} INTEGER {null}'

    @staticmethod
    def string_column(column):
        return '{name} VARCHAR({length}) {null}'

    @staticmethod
    def text_column(column):
        return '{name} TEXT {null}'

    @staticmethod
    def date_column(column):
        return '{name} DATE {null}'

    @staticmethod
    def numeric_column(column):
        return '{name} NUMERIC({precision}, {scale}) {null}'

    @staticmethod
    def boolean_column(column):
        return '{name} BOOLEAN {null}'

    @staticmethod
    def choice_column(column):
        return '{name} VARCHAR({length}) {null}'


class PostgresqlTranslator(SQLTranslator):

    @classmethod
    def insert(cls, table_name, field_names, generated_key=None):
        sql = super().insert(table_name, field_names)
        if generated_key is not None:
            sql += ' RETURNING {}'.format(generated_key)
        return sql


class MysqlTranslator(SQLTranslator):

    @staticmethod
    def serial_column(column):
        return '{name} INTEGER AUTO_INCREMENT PRIMARY KEY'


class SqliteTranslator(SQLTranslator):

    PLACEHOLDER = '?'

    @staticmethod
    def year(expression):
        return "CAST(strftime('%Y', {}) AS INTEGER)".format(expression)

    @staticmethod
    def adapt(parameters):
        """
        sqlite3 has no native date nor decimal type, dates are stored as
        ISO 8601 strings so that they compare and sort as dates.
        """
        adapted = []
        for value in parameters:
            if isinstance(value, datetime.date):
                value = value.isoformat()
            elif isinstance(value, Decimal):
                value = str(value)
            adapted.append(value)
        return tuple(adapted)

    @staticmethod
    def serial_column(column):
        return '{name} INTEGER PRIMARY KEY AUTOINCREMENT'
