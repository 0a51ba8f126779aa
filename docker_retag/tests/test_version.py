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

import pytest

from docker_retag.version import get_version


@pytest.mark.parametrize('version,form,expected', [
    ((0, 2, 0, 'final', 0), 'short', '0.2.0'),
    ((0, 2, 0, 'final', 0), 'branch', '0.2'),
    ((0, 2, 0, 'final', 0), 'normal', '0.2'),
    ((0, 2, 0, 'final', 0), 'verbose', '0.2 final'),
    ((0, 2, 1, 'final', 0), 'normal', '0.2.1'),
    ((0, 3, 0, 'rc', 1), 'short', '0.3rc1'),
    ((0, 3, 0, 'rc', 1), 'normal', '0.3 rc 1'),
    ((0, 3, 1, 'dev', 0), 'short', '0.3.1dev'),
    ((0, 3, 1, 'dev', 0), 'verbose', '0.3.1 pre-dev'),
])
def test_get_version(version, form, expected):
    assert get_version(form, version) == expected


def test_get_version_all():
    versions = get_version('all', (1, 0, 0, 'final', 0))
    assert set(versions) == {'branch', 'short', 'normal', 'verbose'}


def test_get_version_invalid_form():
    with pytest.raises(TypeError):
        get_version('long')
