#!/usr/bin/env python3

import logging
import sys

from .fields import FieldIsNotValidError
from .statements import StatementBuilder


_logger = logging.getLogger(__name__)


class Session:
    """
    One interactive session: the database connection, the stream read for
    user input and the streams written for the user.

    The connection is opened when the session is entered and closed when
    the session is left, whatever the way it is left.
    """

    def __init__(self, database, stdin=None, stdout=None, stderr=None):
        self.database = database
        self.builder = StatementBuilder(database.sql_translator)
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

    def __enter__(self):
        self.database.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.database.close()

    def print(self, *args, **kwargs):
        kwargs.setdefault('file', self.stdout)
        print(*args, **kwargs)

    def error(self, *args):
        print(*args, file=self.stderr)

    def readline(self):
        """
        Return next line of user input without line break.

        EOFError is raised at the end of input.
        """
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError('end of input')
        return line.rstrip('\r\n')

    def prompt(self, label, field):
        """
        Read lines until a line is valid for field and return its value.
        There is no retry limit.
        """
        while True:
            self.print(label, end='')
            raw = self.readline()
            try:
                return field.valid(raw)
            except FieldIsNotValidError as error:
                _logger.debug("invalid input %r for %r: %s", raw, label, error)
                self.print("Invalid input: {}".format(error))

    def collect(self, fields):
        """
        Prompt each (name, label, field) of fields and return a dict
        {name: value}.
        """
        return {name: self.prompt(label, field) for name, label, field in fields}
