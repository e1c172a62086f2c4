#!/usr/bin/env python3
from .sqltranslator import MetaSQLTranslator

import importlib
import logging
import os


_logger = logging.getLogger(__name__)


class Error(Exception):
    """
    Exception that is the base class of all other error exceptions.
    You can use this to catch all errors with one single except statement
    """


class InterfaceError(Error):
    """
    Exception raised for errors that are related to the database interface
    rather than the database itself.
    """


class DatabaseError(Error):
    """
    Exception raised for errors that are related to the database.
    """


class DataError(DatabaseError):
    """
    Exception raised for errors that are due to problems with the processed data
    like division by zero, numeric value out of range, etc.
    """


class OperationalError(DatabaseError):
    """
    Exception raised for errors that are related to the database's operation and not
    necessarily under the control of the programmer, e.g. an unexpected disconnect occurs,
    the data source name is not found, a transaction could not be processed, a memory
    allocation error occurred during processing, etc.
    """


class IntegrityError(DatabaseError):
    """
    Exception raised when the relational integrity of the database is affected,
    e.g. a foreign key check fails.
    """


class InternalError(DatabaseError):
    """
    Exception raised when the database encounters an internal error,
    e.g. the cursor is not valid anymore, the transaction is out of sync, etc.
    """


class ProgrammingError(DatabaseError):
    """
    Exception raised for programming errors, e.g. table not found or already exists,
    syntax error in the SQL statement, wrong number of parameters specified, etc.
    """


class NotSupportedError(DatabaseError):
    """
    Exception raised in case a method or database API was used which is not supported by the database,
    e.g. requesting a .rollback() on a connection that does not support transaction or has transactions turned off.
    """


PEP_249_ERROR = {
    "Error": Error,
    "InterfaceError": InterfaceError,
    "DatabaseError": DatabaseError,
    "DataError": DataError,
    "OperationalError": OperationalError,
    "IntegrityError": IntegrityError,
    "InternalError": InternalError,
    "ProgrammingError": ProgrammingError,
    "NotSupportedError": NotSupportedError
}


def translate_error(error, sql_query=None, parameters=()):
    """
    Return the PEP 249 exception of this module matching a driver exception.

    Drivers such as psycopg2 raise subclasses of the standard exceptions
    (UniqueViolation, ForeignKeyViolation...), so the class hierarchy is
    searched for the first standard name.
    """
    for cls in type(error).__mro__:
        if cls.__name__ in PEP_249_ERROR:
            cls_error = PEP_249_ERROR[cls.__name__]
            break
    else:
        cls_error = Error
    message = error.args[0] if error.args else str(error)
    return cls_error(message, sql_query, parameters)


class QueryResult:
    """
    Rows returned by a query.

    column_names - names in the order reported by the engine.
    row_count - number of rows consumed so far.

    The rows are read from the cursor once, a QueryResult cannot be iterated twice.
    """

    def __init__(self, cursor, database):
        self._cursor = cursor
        self._database = database
        self.column_names = tuple(column[0] for column in cursor.description or ())
        self.row_count = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self._cursor is None:
            raise StopIteration()
        try:
            values = self._cursor.fetchone()
        except self._database.error as error:
            raise translate_error(error) from error
        if values is None:
            cursor, self._cursor = self._cursor, None
            cursor.close()
            raise StopIteration()
        self.row_count += 1
        return tuple(values)


class DataBase:
    """
    Single connection to a relational engine.

    provider - name of a connector adapter (sqlite, postgresql, mysql).
    connection_parameters - standard names (database, host, port, user, password)
                            translated by the connector adapter.
    """

    def __init__(self, provider, **connection_parameters):
        self.provider = provider
        self.connection = None

        try:
            connector_adapter = MetaConnectorAdapter.PROVIDERS[provider]
        except KeyError:
            raise ValueError("'provider' parameter must be on of {}"
                             .format(', '.join(sorted(MetaConnectorAdapter.PROVIDERS))))

        self.url = connector_adapter.url(connection_parameters)
        self.sql_translator = MetaSQLTranslator.PROVIDERS[provider]
        self.module = importlib.import_module(connector_adapter.PROVIDER_MODULE)
        self.connector = self.module.connect
        self.error = self.module.Error
        self.connection_parameters = connector_adapter(connection_parameters).connection_parameters

    def connect(self):
        if self.connection is None:
            _logger.info("connecting to %s", self.url)
            try:
                self.connection = self.connector(**self.connection_parameters)
            except self.error as error:
                raise translate_error(error) from error
        return self.connection

    def close(self):
        """
        Release the connection. Calling close twice is harmless.
        """
        if self.connection is not None:
            connection, self.connection = self.connection, None
            _logger.info("disconnecting from %s", self.url)
            try:
                connection.close()
            except self.error as error:
                _logger.warning("error while closing connection: %s", error)

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _execute(self, statement):
        if self.connection is None:
            raise InterfaceError("database connection is not open", statement.sql,
                                 statement.parameters)
        parameters = self.sql_translator.adapt(statement.parameters)
        _logger.debug("execute %s %r", statement.sql, parameters)
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute(statement.sql, parameters)
            return cursor
        except self.error as error:
            _logger.warning("statement failed: %s", error)
            if cursor is not None:
                cursor.close()
            self._rollback()
            raise translate_error(error, statement.sql, parameters) from error

    def _rollback(self):
        try:
            self.connection.rollback()
        except self.error as error:
            _logger.warning("rollback failed: %s", error)

    def execute_mutation(self, statement):
        """
        Execute and commit a statement which doesn't return rows.

        Return the key generated by the engine when the statement names a
        generated_key column, else None.
        """
        cursor = self._execute(statement)
        generated_key = None
        try:
            if statement.generated_key is not None:
                if cursor.description:
                    generated_key = cursor.fetchone()[0]
                else:
                    generated_key = cursor.lastrowid
            self.connection.commit()
        except self.error as error:
            self._rollback()
            raise translate_error(error, statement.sql, statement.parameters) from error
        finally:
            cursor.close()
        return generated_key

    def execute_query(self, statement):
        """
        Execute a statement returning rows and return a QueryResult.
        """
        return QueryResult(self._execute(statement), self)


class MetaConnectorAdapter(type):
    """
    Store connector adapter in PROVIDERS attribute. The key of PROVIDERS is
    lower-case class name without ConnectorAdapter suffix

    i.e: SqliteConnectorAdapter --> sqlite
    """

    PROVIDERS = {}

    def __init__(cls, name, bases, attrs):
        if name != 'ConnectorAdapter':
            if name.endswith('ConnectorAdapter'):
                provider_name = name[:-len('ConnectorAdapter')].lower()
                type(cls).PROVIDERS[provider_name] = cls
                cls.PROVIDER = provider_name
            else:
                raise ValueError("{} class name must end with by '{}'"
                                 .format(cls, 'ConnectorAdapter'))

            if 'EXPECTED_ARGS' not in attrs:
                raise AttributeError("{} class must have 'EXPECTED_ARGS' attribute"
                                     .format(cls))

            if not isinstance(attrs['EXPECTED_ARGS'], dict):
                raise TypeError('{} EXPECTED_ARGS attribute must be a dict'.format(cls))

            if 'OPTIONAL_ARGS' not in attrs:
                raise AttributeError("{} class must have 'OPTIONAL_ARGS' attribute"
                                     .format(cls))

            if not isinstance(attrs['OPTIONAL_ARGS'], dict):
                raise TypeError('{} OPTIONAL_ARGS attribute must be a dict'.format(cls))

            # Bound staticmethod and classmethod in the EXPECTED_ARGS and OPTIONAL_ARGS dict.
            for mtd_name, mtd in attrs.items():
                if isinstance(mtd, (staticmethod, classmethod)):
                    for k, v in attrs['EXPECTED_ARGS'].items():
                        if v is mtd:
                            attrs['EXPECTED_ARGS'][k] = getattr(cls, mtd_name)

                    for k, v in attrs['OPTIONAL_ARGS'].items():
                        if v is mtd:
                            attrs['OPTIONAL_ARGS'][k] = getattr(cls, mtd_name)


class ConnectorAdapter(metaclass=MetaConnectorAdapter):
    """
    Class base to translate parameters of connection to the concrete database connector.
    after instantiation, translated parameters are accessible by connection_parameters attribute.

    A ConnectorAdapter must have EXPECTED_ARGS and OPTIONAL_ARGS class attribute dict.
    The keys are the standards names such as (database, host, port, user, password ...) and
    the values are translated name to connect function parameters. A value can be a callable or
    unbound static or class method which translate parameters.
    """
    def __init__(self, connection_parameters):
        self.connection_parameters = self.translate_kwargs(connection_parameters)

    @classmethod
    def url(cls, parameters):
        """
        Return connection URL as <provider>://<host>:<port>/<database>
        """
        return "{}://{}:{}/{}".format(cls.PROVIDER,
                                      parameters.get('host', ''),
                                      parameters.get('port', ''),
                                      parameters.get('database', ''))

    @classmethod
    def translate_kwargs(cls, parameters):
        """
        Use EXPECTED_ARGS and OPTIONAL_ARGS class attribute in order to check and translate
        parameters.
        """
        unexpected_kwargs = set(parameters) - (set(cls.EXPECTED_ARGS) | set(cls.OPTIONAL_ARGS))
        if unexpected_kwargs:
            raise TypeError("{} database provider got unexpected keywords arguments ({})"
                            .format(cls.PROVIDER, ', '.join(sorted(unexpected_kwargs))))

        missing_kwargs = set(cls.EXPECTED_ARGS) - set(parameters)
        if missing_kwargs:
            raise TypeError("missing required arguments ({}) to {} database provider"
                            .format(', '.join(sorted(str(e) for e in missing_kwargs)),
                                    cls.PROVIDER))

        translated_kwargs = {}
        for std_name, translated_name in cls.EXPECTED_ARGS.items():
            if callable(translated_name):
                translated_kwargs.update(
                    translated_name(parameters[std_name]))
            else:
                translated_kwargs[translated_name] = parameters[std_name]
        for std_name, translated_name in cls.OPTIONAL_ARGS.items():
            if std_name in parameters:
                if callable(translated_name):
                    translated_kwargs.update(
                        translated_name(parameters[std_name]))
                else:
                    translated_kwargs[translated_name] = parameters[std_name]

        return translated_kwargs


class SqliteConnectorAdapter(ConnectorAdapter):

    @staticmethod
    def translate_database(database):
        if database != ':memory:':
            database = os.path.abspath(database)
        return dict(database=database)

    @staticmethod
    def ignore(value):
        return {}

    @classmethod
    def url(cls, parameters):
        return "sqlite:///{}".format(parameters.get('database', ''))

    EXPECTED_ARGS = {'database': translate_database}
    OPTIONAL_ARGS = {'timeout': 'timeout',
                     'isolation_level': 'isolation_level',
                     'host': ignore,
                     'port': ignore,
                     'user': ignore,
                     'password': ignore}
    PROVIDER_MODULE = 'sqlite3'


class MysqlConnectorAdapter(ConnectorAdapter):
    EXPECTED_ARGS = {'host': 'host',
                     'port': 'port',
                     'user': 'user',
                     'database': 'database'}
    OPTIONAL_ARGS = {'password': 'password',
                     'charset': 'charset'}
    PROVIDER_MODULE = 'pymysql'


class PostgresqlConnectorAdapter(ConnectorAdapter):
    EXPECTED_ARGS = {'host': 'host',
                     'port': 'port',
                     'user': 'user',
                     'database': 'dbname'}
    OPTIONAL_ARGS = {'password': 'password',
                     'connect_timeout': 'connect_timeout'}
    PROVIDER_MODULE = 'psycopg2'
