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

"""HTTP helpers for talking to registries"""
from typing import Tuple

import aiohttp
import async_timeout


async def async_req(url: str, timeout: float = 30, method: str = "GET",
                    auth: aiohttp.BasicAuth = None, params: dict = None,
                    **kwargs) -> Tuple[aiohttp.ClientResponse, bytes]:
    """
    Async http request with aiohttp. It is issued exactly once,
    callers decide what to do with failures.

    Args:
        url (str): request url
        timeout (float): timeout in seconds for the whole exchange
        method (str): HTTP method
        auth (aiohttp.BasicAuth): basic auth credentials
        params (dict): query string parameters

    Remaining keyword arguments are sent as request headers, except
    ``data`` which is sent as request body.

    Returns:
        (ClientResponse, bytes): response instance, raw response body

    Raises:
        asyncio.TimeoutError: request did not complete in time
        aiohttp.ClientError: connection or protocol error

    """
    data = kwargs.pop('data', None)
    headers = kwargs

    async with aiohttp.ClientSession() as session:
        async with async_timeout.timeout(timeout):
            async with session.request(method, url, params=params, data=data,
                                       auth=auth, headers=headers) as resp:
                return resp, await resp.read()


def status_line(resp: aiohttp.ClientResponse) -> str:
    """Return upstream status line of response, e.g. ``404 Not Found``"""
    if resp.reason:
        return "{} {}".format(resp.status, resp.reason)
    return str(resp.status)
