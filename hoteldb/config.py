#!/usr/bin/env python3
#-*- coding:utf-8 -*-

import json
import os

from .db import MetaConnectorAdapter


ENVIRON_VAR_NAME = 'HOTELDB_CONFIG_FILE'
DEFAULT_FILE_NAME = 'hoteldb.json'


class ConfigIsNotValidError(Exception):
    def __init__(self, msg, path=[]):
        super().__init__(msg)
        self.msg = msg
        self.path_through_conf = list(path)

    def __str__(self):
        path = '.'.join(self.path_through_conf)
        if path:
            return "{}: {}".format(path, self.msg)
        return self.msg

    __repr__ = __str__


class ChoiceValidator:
    """
    Valide if item is one of choices.
    """
    def __init__(self, choices, is_required=True):
        self.is_required = is_required
        self.choices = choices

    def valid(self, item):
        if item not in self.choices:
            msg = 'must be one of {}'.format(', '.join(self.choices))
            raise ConfigIsNotValidError(msg)
        return item


class IsTypeValidator:
    expected_type = NotImplemented
    name_type = NotImplemented

    def __init__(self, can_be_null=False, is_required=True):
        self.is_required = is_required
        self.can_be_null = can_be_null

    def valid(self, item):
        if item is None and self.can_be_null:
            return None

        if not isinstance(item, self.expected_type):
            msg = 'must be a {}'.format(self.name_type)
            if self.can_be_null:
                msg += ' or null'
            raise ConfigIsNotValidError(msg)
        return item


class StrValidator(IsTypeValidator):
    expected_type = str
    name_type = 'string'


class DictValidator(IsTypeValidator):
    expected_type = dict
    name_type = 'object'

    def __init__(self, can_be_null=False, is_required=True, children={}):
        super().__init__(can_be_null, is_required)
        self.children = children.copy()

    def valid(self, item):
        clean_item = super().valid(item)
        unexpected = set(clean_item) - set(self.children)
        if unexpected:
            raise ConfigIsNotValidError("unexpected key", [sorted(unexpected)[0]])
        clean_children = {}
        for key, validator in self.children.items():
            if key in clean_item:
                try:
                    clean_children[key] = validator.valid(clean_item[key])
                except ConfigIsNotValidError as error:
                    path = [key] + error.path_through_conf
                    raise ConfigIsNotValidError(error.msg, path)
            elif validator.is_required:
                raise ConfigIsNotValidError("is required", [key])
        return clean_children


VALIDATOR = DictValidator(children={
    "database": DictValidator(is_required=False, children={
        "provider": ChoiceValidator(sorted(MetaConnectorAdapter.PROVIDERS), is_required=False),
        "host": StrValidator(is_required=False),
        "password": StrValidator(can_be_null=True, is_required=False),
    }),
    "log_level": ChoiceValidator(("DEBUG", "INFO", "WARNING", "ERROR"), is_required=False),
})

DEFAULTS = {
    "database": {
        "provider": "postgresql",
        "host": "localhost",
    },
    "log_level": "WARNING",
}


class ConfigReader:
    """
    Read the JSON configuration file.

    The path is given by path_to_conf, else by HOTELDB_CONFIG_FILE environment
    variable, else it is hoteldb.json in the current directory. The default
    file may not exist, in this case the defaults are used.
    """

    FILE_NAME = DEFAULT_FILE_NAME
    VALIDATOR = VALIDATOR

    def __init__(self, path_to_conf=None):
        self.path_to_conf = path_to_conf
        self.database = {}
        self.log_level = None
        self.reload_config()

    def reload_config(self):
        path_to_conf = self.path_to_conf or os.environ.get(ENVIRON_VAR_NAME)
        configuration = {}
        if path_to_conf is not None:
            configuration = self.load(path_to_conf)
        elif os.path.isfile(self.FILE_NAME):
            configuration = self.load(os.path.abspath(self.FILE_NAME))

        clean = self.VALIDATOR.valid(configuration)
        database = dict(DEFAULTS['database'])
        database.update(clean.get('database', {}))
        self.database = database
        self.log_level = clean.get('log_level', DEFAULTS['log_level'])

    @staticmethod
    def load(path_to_conf):
        try:
            with open(path_to_conf, 'r') as config_file:
                configuration = json.load(config_file)
        except ValueError as error:
            raise ConfigIsNotValidError(
                "'{}' is not a valid json file ({})".format(path_to_conf, error))

        if not isinstance(configuration, dict):
            raise ConfigIsNotValidError(
                "'{}' config file must contain a json dict".format(path_to_conf))
        return configuration
