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

import logging

import pytest

from docker_retag.config import Config, InvalidConfig, MissingCredentials, config
from docker_retag.log import build_logger


@pytest.fixture
def conf(monkeypatch, tmp_path):
    for key in ('DOCKER_USER', 'DOCKER_PASS', 'RETAG_TIMEOUT', 'RETAG_REGISTRY_URL',
                'RETAG_AUTH_URL', 'RETAG_AUTH_SERVICE', 'RETAG_LOG_LEVEL', 'RETAG_LOG_FILE'):
        monkeypatch.delenv(key, raising=False)
    yield config
    config()


def write(tmp_path, content):
    path = tmp_path / 'config.toml'
    path.write_text(content)
    return str(path)


def test_singleton():
    assert Config() is Config() is config


def test_defaults(conf):
    assert conf.registry_url == 'https://index.docker.io'
    assert conf.auth_url == 'https://auth.docker.io/token'
    assert conf.auth_service == 'registry.docker.io'
    assert conf.timeout == 30.0
    assert conf.log_level == 'WARNING'


def test_environment_wins_over_file(conf, monkeypatch, tmp_path):
    conf(config_file=write(tmp_path, "[registry]\ntimeout = 5\nurl = 'http://file'\n"))
    monkeypatch.setenv('RETAG_TIMEOUT', '9.5')

    assert conf.timeout == 9.5
    assert conf.registry_url == 'http://file'


def test_credentials_from_environment(conf, monkeypatch, tmp_path):
    conf(config_file=write(tmp_path, "[credentials]\nusername = 'a'\npassword = 'b'\n"))
    monkeypatch.setenv('DOCKER_USER', 'env-user')

    assert conf.username == 'env-user'
    assert conf.password == 'b'


def test_missing_credentials(conf):
    with pytest.raises(MissingCredentials, match='^DOCKER_USER not found in environment$'):
        _ = conf.username
    with pytest.raises(MissingCredentials, match='^DOCKER_PASS not found in environment$'):
        _ = conf.password


def test_empty_password_is_accepted(conf, monkeypatch):
    monkeypatch.setenv('DOCKER_PASS', '')
    assert conf.password == ''


def test_log_level_is_normalized(conf, monkeypatch):
    monkeypatch.setenv('RETAG_LOG_LEVEL', 'debug')
    assert conf.log_level == 'DEBUG'


def test_missing_file_falls_back_to_defaults(conf, tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        conf(config_file=str(tmp_path / 'missing.toml'))

    assert conf.conf == {}
    assert conf.registry_url == 'https://index.docker.io'
    assert 'Could not found config file' in caplog.text


def test_malformed_file_falls_back_to_defaults(conf, tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        conf(config_file=write(tmp_path, "[registry\nurl = "))

    assert conf.conf == {}
    assert conf.timeout == 30.0
    assert 'Could not load config toml file' in caplog.text


def test_build_logger():
    logger = build_logger(log_level=logging.INFO)
    assert logger.name == 'docker_retag'
    assert logger.level == logging.INFO


def test_falsy_file_values_are_not_replaced_by_defaults(conf, tmp_path):
    conf(config_file=write(tmp_path, "[registry]\nservice = ''\n"))
    assert conf.auth_service == ''


@pytest.mark.parametrize('content,message', [
    ("[registry]\ntimeout = 0\n", '^invalid registry.timeout: 0$'),
    ("[registry]\ntimeout = 'soon'\n", '^invalid registry.timeout: soon$'),
    ("[retag]\nlog_level = 'loud'\n", '^invalid retag.log_level: loud$'),
])
def test_invalid_file_values(conf, tmp_path, content, message):
    conf(config_file=write(tmp_path, content))
    with pytest.raises(InvalidConfig, match=message):
        _ = conf.timeout
        _ = conf.log_level


def test_invalid_environment_values(conf, monkeypatch):
    monkeypatch.setenv('RETAG_TIMEOUT', '')
    with pytest.raises(InvalidConfig, match='^invalid RETAG_TIMEOUT: $'):
        _ = conf.timeout

    monkeypatch.setenv('RETAG_LOG_LEVEL', 'verbose')
    with pytest.raises(InvalidConfig, match='^invalid RETAG_LOG_LEVEL: verbose$'):
        _ = conf.log_level


def test_log_file(conf, monkeypatch, tmp_path):
    assert conf.log_file is None
    conf(config_file=write(tmp_path, "[retag]\nlog_file = '/tmp/from-file.log'\n"))
    assert conf.log_file == '/tmp/from-file.log'
    monkeypatch.setenv('RETAG_LOG_FILE', '/tmp/from-env.log')
    assert conf.log_file == '/tmp/from-env.log'


def test_build_logger_with_file(tmp_path):
    log_file = tmp_path / 'retag.log'
    logger = build_logger(filename=str(log_file), log_level=logging.INFO)
    try:
        logger.info("written to file")
    finally:
        for handler in list(logger.handlers):
            if isinstance(handler, logging.FileHandler):
                logger.removeHandler(handler)
                handler.close()

    assert 'INFO - written to file' in log_file.read_text()
