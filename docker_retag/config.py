# Beiran P2P Package Distribution Layer
# Copyright (C) 2019  Rainlab Inc & Creationline, Inc & Beiran Contributors
#
# Rainlab Inc. https://rainlab.co.jp
# Creationline, Inc. https://creationline.com">
# Beiran Contributors https://docs.beiran.io/contributors.html
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""
docker-retag Configuration Module
"""

import os
import logging
from typing import Any, Optional, Union

import toml

from docker_retag import RetagError
from docker_retag.log import is_level_name

LOGGER = logging.getLogger(__package__)

DEFAULTS = {
    'REGISTRY_URL': 'https://index.docker.io',
    'AUTH_URL': 'https://auth.docker.io/token',
    'AUTH_SERVICE': 'registry.docker.io',
    'TIMEOUT': 30,
    'LOG_LEVEL': 'WARNING',
}

# credential variables carry no RETAG_ prefix
USERNAME_ENV = 'DOCKER_USER'
PASSWORD_ENV = 'DOCKER_PASS'


class MissingCredentials(RetagError):
    """Registry credentials are not configured"""
    pass


class InvalidConfig(RetagError):
    """A configured value cannot be used"""
    pass


class ConfigMeta(type):
    """
    Metaclass for config object, every instantiation returns the same object.
    """
    _instances: dict = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super(
                ConfigMeta, cls).__call__(*args, **kwargs)

        return cls._instances[cls]


class Config(metaclass=ConfigMeta):
    """Configuration object holds configuration parameters as
    class properties. Values are looked up in environment first,
    then in config toml file, then in defaults."""

    def __init__(self, config_file=None):
        """construct config object"""
        self.conf = dict()

        if config_file:
            self.conf = self.load_from_file(config_file) or dict()

    def get_config_from_file(self, ckey=None):
        """get config from config.toml, ``ckey`` is dotted, e.g. ``registry.url``"""
        if ckey is None:
            return None

        val = self.conf
        for key in ckey.split('.'):
            if not isinstance(val, dict) or key not in val:
                return None
            val = val[key]
        return val

    def get_config(self, ckey: str = '', ekey: str = '') -> Union[Any, object]:
        """
        Seek for config val through environment and config depending
        on given keys.

        One of the args `ckey`, `ekey` must be specified.

        Args:
            ckey: key in config file
            ekey: key in environment, without ``RETAG_`` prefix

        Returns:
            str, dict: value

        """
        if not any([ckey, ekey]):
            return None

        value = os.getenv("RETAG_{}".format(ekey))
        if value is None:
            value = self.get_config_from_file(ckey)
        if value is None:
            value = DEFAULTS.get(ekey, None)
        return value

    @staticmethod
    def load_from_file(config_file: str) -> Optional[dict]:
        """
        Load config values from given file
        Args:
            config_file (str): file path

        Returns:
            dict: parsed toml, None if file cannot be loaded

        """
        try:
            with open(config_file, 'r') as cfile:
                return toml.load(cfile)
        except FileNotFoundError:
            LOGGER.error(
                "Could not found config file at location: %s",
                config_file)
        except toml.TomlDecodeError as err:
            LOGGER.error(
                "Could not load config toml file, "
                "please check your config file syntax. %s", err
            )
        return None

    @property
    def username(self) -> str:
        """
        Registry user name. There is no default, it must be set.

        config.toml: section ``credentials``, key ``username``

        Environment variable: ``DOCKER_USER``

        """
        return self._credential(USERNAME_ENV, 'credentials.username')

    @property
    def password(self) -> str:
        """
        Registry password or access token. There is no default, it
        must be set.

        config.toml: section ``credentials``, key ``password``

        Environment variable: ``DOCKER_PASS``

        """
        return self._credential(PASSWORD_ENV, 'credentials.password')

    def _credential(self, ekey: str, ckey: str) -> str:
        value = os.getenv(ekey)
        if value is None:
            value = self.get_config_from_file(ckey)
        if value is None:
            raise MissingCredentials("{} not found in environment".format(ekey))
        return str(value)

    @property
    def registry_url(self) -> str:
        """
        Base url of registry API. The default value is
        ``https://index.docker.io``.

        config.toml: section ``registry``, key ``url``

        Environment variable: ``RETAG_REGISTRY_URL``

        """
        return str(self.get_config('registry.url', 'REGISTRY_URL')).rstrip('/')

    @property
    def auth_url(self) -> str:
        """
        Token endpoint used for authentication. The default value is
        ``https://auth.docker.io/token``.

        config.toml: section ``registry``, key ``auth_url``

        Environment variable: ``RETAG_AUTH_URL``

        """
        return str(self.get_config('registry.auth_url', 'AUTH_URL'))

    @property
    def auth_service(self) -> str:
        """
        Service name requested from the token endpoint. The default
        value is ``registry.docker.io``.

        config.toml: section ``registry``, key ``service``

        Environment variable: ``RETAG_AUTH_SERVICE``

        """
        return str(self.get_config('registry.service', 'AUTH_SERVICE'))

    def _origin(self, ckey: str, ekey: str) -> str:
        """Name the place a value was read from, for error messages"""
        if os.getenv("RETAG_{}".format(ekey)) is not None:
            return "RETAG_{}".format(ekey)
        if self.get_config_from_file(ckey) is not None:
            return ckey
        return ekey

    @property
    def timeout(self) -> float:
        """
        Timeout in seconds for each request sent to registry. It must
        be a positive number. The default value is ``30``.

        config.toml: section ``registry``, key ``timeout``

        Environment variable: ``RETAG_TIMEOUT``

        """
        value = self.get_config('registry.timeout', 'TIMEOUT')
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            timeout = None
        if timeout is None or not timeout > 0:
            raise InvalidConfig("invalid {}: {}".format(
                self._origin('registry.timeout', 'TIMEOUT'), value))
        return timeout

    @property
    def log_level(self) -> str:
        """
        Logging level. The default value is ``WARNING``. Standard
        logging level strings of Python's logging module are valid.

        config.toml: section ``retag``, key ``log_level``

        Environment variable: ``RETAG_LOG_LEVEL``

        """
        value = self.get_config('retag.log_level', 'LOG_LEVEL')
        level = str(value).upper()
        if not is_level_name(level):
            raise InvalidConfig("invalid {}: {}".format(
                self._origin('retag.log_level', 'LOG_LEVEL'), value))
        return level

    @property
    def log_file(self) -> Optional[str]:
        """
        A file which logs are appended to, besides stderr. Not set by
        default.

        config.toml: section ``retag``, key ``log_file``

        Environment variable: ``RETAG_LOG_FILE``

        """
        value = self.get_config('retag.log_file', 'LOG_FILE')
        return str(value) if value else None

    def __call__(self, config_file=None):
        """
        Allow reinitialize instance with a new config file

        Args:
            config_file: config file path

        Returns:
            self: reinitialized instance

        """
        self.__init__(config_file)
        return self


config = Config() # pylint: disable=invalid-name
