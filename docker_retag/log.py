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
Logging setup for docker-retag. Records go to stderr, stdout only
carries the retag confirmation line.
"""

import sys
import logging

from typing import Union

LOG_FORMAT = '[%(asctime)s] [%(name)s] %(levelname)s - %(message)s'


def build_logger(filename: str = None, log_level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """
    Configure logging to stderr and return the ``docker_retag`` logger.

    Args:
        filename (str): records of the package are also appended to this file
        log_level (int, str): level of the package logger

    """
    logging.getLogger('asyncio').level = logging.WARNING
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    logger = logging.getLogger(__package__)
    logger.setLevel(log_level)
    if filename:
        add_log_file(logger, filename)
    return logger


def add_log_file(logger: logging.Logger, filename: str) -> logging.FileHandler:
    """Append records of `logger` to `filename`, return the new handler.

    Raises:
        OSError: file cannot be opened for appending
    """
    handler = logging.FileHandler(filename)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def is_level_name(name: str) -> bool:
    """True if `name` is a level name known to logging, e.g. ``INFO``"""
    return isinstance(logging.getLevelName(name), int)
