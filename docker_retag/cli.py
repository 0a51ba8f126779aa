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

"""command line client for retagging images in a remote registry"""

import asyncio
import logging

import click

from docker_retag import RetagError
from docker_retag.config import InvalidConfig, config
from docker_retag.log import add_log_file, build_logger
from docker_retag.reference import resolve
from docker_retag.registry import RegistryClient
from docker_retag.version import __version__

PROG_NAME = 'docker-retag'

# pylint: disable=invalid-name
logger = build_logger()  # type: ignore

STAGE_MESSAGES = (
    (RegistryClient.AuthenticationFailed, 'failed to authenticate'),
    (RegistryClient.ManifestFetchFailed, 'failed to pull manifest'),
    (RegistryClient.ManifestPublishFailed, 'failed to push manifest'),
)


class RetagFailed(click.ClickException):
    """Renders any failure as a single line prefixed with the tool name"""

    def show(self, file=None):
        if file is None:
            file = click.get_text_stream('stderr')
        click.echo('{}: {}'.format(PROG_NAME, self.format_message()), file=file)


def describe_error(err: RetagError) -> str:
    """Prefix registry errors with the stage which failed"""
    for error_class, message in STAGE_MESSAGES:
        if isinstance(err, error_class):
            return '{}: {}'.format(message, err)
    return str(err)


def open_log_file(filename: str):
    """Attach a file handler to the package logger, if a file is given"""
    if not filename:
        return None
    try:
        return add_log_file(logger, filename)
    except OSError as err:
        raise InvalidConfig("cannot open log file {}: {}".format(filename, err.strerror or err))


@click.command(name=PROG_NAME)
@click.option('--debug', is_flag=True, default=False, help='Enable debug logs.')
@click.option('--config', "config_file", default=None, required=False,
              type=click.Path(dir_okay=False),
              help="Path to a config file. It must be a TOML file.")
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds to wait for each registry request.")
@click.option('--log-file', default=None, type=click.Path(dir_okay=False),
              help="Append logs to this file as well.")
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.argument('args', nargs=-1, metavar='NAME[:TAG|@DIGEST] [SOURCE] TARGET')
def main(debug: bool, config_file: str, timeout: float, log_file: str, args: tuple): # pylint: disable=too-many-arguments
    """Retag an image in a remote registry without pulling it

    The manifest of the source reference is copied verbatim to the
    target tag. Source may be a tag or a sha256 digest, target must
    be a tag.

    \b
    docker-retag org/example 1.2.3 4.5.6
    docker-retag org/example:1.2.3 4.5.6
    docker-retag org/example@sha256:<hex> 4.5.6
    docker-retag example 4.5.6      # library/example:latest

    Credentials are read from DOCKER_USER and DOCKER_PASS.
    """
    if config_file:
        config(config_file=config_file)
    log_handler = None

    try:
        logger.setLevel(logging.DEBUG if debug else config.log_level)
        log_handler = open_log_file(log_file or config.log_file)

        operation = resolve(args)
        logger.debug("resolved %s into %s", " ".join(args), operation)

        username, password = config.username, config.password
        client = RegistryClient(
            registry_url=config.registry_url,
            auth_url=config.auth_url,
            service=config.auth_service,
            timeout=timeout if timeout is not None else config.timeout,
            logger=logger
        )
        asyncio.run(client.retag(operation, username, password))
    except RetagError as err:
        raise RetagFailed(describe_error(err))
    finally:
        if log_handler is not None:
            logger.removeHandler(log_handler)
            log_handler.close()

    click.echo('Retagged {} as {}'.format(operation.source_ref, operation.target_ref))
