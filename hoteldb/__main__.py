#!/usr/bin/env python3

from .config import ConfigReader, ConfigIsNotValidError
from .console import Console
from .db import DataBase, Error, MetaConnectorAdapter
from .session import Session
from .statements import StatementBuilder
import argparse
import logging
import os
import sys
import traceback


class PathExist:
    """
    Factory to test if path is an existing file
    """

    def __call__(self, string):
        """
        Return absolute path of string if string is an existing file.
        """
        if not os.path.isfile(string):
            msg = "'{}' isn't file".format(string)
            raise argparse.ArgumentTypeError(msg)
        return os.path.abspath(string)


def port_number(string):
    """
    string must be a TCP port number.
    """
    try:
        port = int(string)
    except ValueError:
        raise argparse.ArgumentTypeError("'{}' isn't a port number".format(string))
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError("port must be between 1 and 65535")
    return port


def build_parser():
    parser = argparse.ArgumentParser(
        'hoteldb', description="Interactive console of the hotel management database")
    parser.add_argument("database", metavar="dbname", help="name of the database")
    parser.add_argument("port", type=port_number, help="port of the database server")
    parser.add_argument("user", help="user name used to login to the database")
    parser.add_argument("--host", action='store', dest="host",
                        help="database server host (default: from configuration or localhost)")
    parser.add_argument("--provider", action='store', dest="provider",
                        choices=sorted(MetaConnectorAdapter.PROVIDERS),
                        help="database provider (default: from configuration or postgresql)")
    parser.add_argument("--password", action='store', dest="password",
                        help="user password")
    parser.add_argument("--conf", metavar="configuration-file", action='store',
                        help='path to configuration file', dest="path_to_conf",
                        type=PathExist())
    parser.add_argument("--create-tables", action='store_true', dest="create_tables",
                        help="create the missing tables before starting")
    parser.add_argument("-v", "--verbose", action='store_true', dest="verbose",
                        help="log executed statements")
    return parser


def connection_parameters(args, config):
    """
    Merge configuration and command line, command line wins.
    """
    parameters = dict(config.database)
    parameters.update(database=args.database, port=args.port, user=args.user)
    for name in ('host', 'provider', 'password'):
        value = getattr(args, name)
        if value is not None:
            parameters[name] = value
    return parameters


def create_tables(database):
    """
    Create the missing tables.
    """
    for statement in StatementBuilder(database.sql_translator).create_tables():
        database.execute_mutation(statement)


def run_console(database, stdin=None, stdout=None, stderr=None):
    """
    Open a session on database and run the menu loop until exit.
    """
    with Session(database, stdin, stdout, stderr) as session:
        try:
            Console(session).run()
        except EOFError:
            session.print()
        finally:
            session.print("Disconnecting from database...")
    session.print("Done\n\nBye !")


def main(argv=None):
    """
    Programme entry point.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as error:
        # --help exits with 0, usage errors with 2
        return 0 if not error.code else 1

    try:
        config = ConfigReader(args.path_to_conf)
    except (ConfigIsNotValidError, OSError) as error:
        print("Error - Invalid configuration: {}".format(error), file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.DEBUG if args.verbose else config.log_level,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    parameters = connection_parameters(args, config)
    provider = parameters.pop('provider')
    try:
        database = DataBase(provider, **parameters)
    except (ValueError, TypeError, ImportError) as error:
        print("Error - {}".format(error), file=sys.stderr)
        return 1

    print("Connecting to database...")
    print("Connection URL: {}\n".format(database.url))
    try:
        database.connect()
    except Error as error:
        print("Error - Unable to Connect to Database: {}".format(error.args[0]), file=sys.stderr)
        print("Make sure the database server is started")
        return 1
    print("Done")

    try:
        if args.create_tables:
            create_tables(database)
        run_console(database)
    except KeyboardInterrupt:
        database.close()
        return 1
    except Exception:
        database.close()
        traceback.print_exc()
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
