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

"""Registry client which copies a manifest from one reference to another"""
import asyncio
import logging
import json

import aiohttp

from docker_retag import RetagError
from docker_retag.lib import async_req, status_line
from docker_retag.reference import ResolvedOperation

MANIFEST_V2_MEDIA_TYPE = "application/vnd.docker.distribution.manifest.v2+json"

DEFAULT_REGISTRY_URL = "https://index.docker.io"
DEFAULT_AUTH_URL = "https://auth.docker.io/token"
DEFAULT_AUTH_SERVICE = "registry.docker.io"

LOGGER = logging.getLogger(__name__)


class RegistryClient:
    """Performs authenticate, fetch and publish calls against a registry"""

    class RegistryError(RetagError):
        """..."""
        pass

    class AuthenticationFailed(RegistryError):
        """..."""
        pass

    class ManifestFetchFailed(RegistryError):
        """..."""
        pass

    class ManifestPublishFailed(RegistryError):
        """..."""
        pass

    def __init__(self, registry_url: str = DEFAULT_REGISTRY_URL, # pylint: disable=too-many-arguments
                 auth_url: str = DEFAULT_AUTH_URL,
                 service: str = DEFAULT_AUTH_SERVICE,
                 timeout: float = 30,
                 logger: logging.Logger = None) -> None:
        self.registry_url = registry_url.rstrip('/')
        self.auth_url = auth_url
        self.service = service
        self.timeout = timeout
        self.logger = logger if logger else LOGGER

    def manifest_url(self, name: str, reference: str) -> str:
        """Get url of manifest of `name` at `reference`"""
        return '{}/v2/{}/manifests/{}'.format(self.registry_url, name, reference)

    async def _request(self, error_class, url: str, **kwargs):
        """Issue a request, converting transport failures into `error_class`"""
        try:
            return await async_req(url, timeout=self.timeout, **kwargs)
        except asyncio.TimeoutError:
            raise error_class("timed out after %ss" % self.timeout)
        except aiohttp.ClientError as error:
            raise error_class(str(error) or error.__class__.__name__)

    async def authenticate(self, name: str, username: str, password: str) -> str:
        """
        Get Bearer token with pull and push access to repository `name`
        from token endpoint, using basic authentication.

        Returns:
            str: bearer token

        Raises:
            AuthenticationFailed: token endpoint refused or answered garbage
        """
        params = {
            'service': self.service,
            'scope': 'repository:{}:pull,push'.format(name),
        }
        self.logger.debug("request token from %s for %s", self.auth_url, params['scope'])

        resp, body = await self._request(
            RegistryClient.AuthenticationFailed, self.auth_url,
            params=params, auth=aiohttp.BasicAuth(username, password)
        )
        if resp.status != 200:
            raise RegistryClient.AuthenticationFailed(status_line(resp))

        try:
            data = json.loads(body)
        except ValueError:
            raise RegistryClient.AuthenticationFailed("invalid token response")

        token = data.get('token') if isinstance(data, dict) else None
        if not token:
            raise RegistryClient.AuthenticationFailed("empty token")
        return token

    async def fetch_manifest(self, token: str, name: str, reference: str) -> bytes:
        """
        Fetch raw v2 manifest of `name` at `reference`.

        Raises:
            ManifestFetchFailed: registry did not answer 200
        """
        url = self.manifest_url(name, reference)
        self.logger.debug("fetch manifest from %s", url)

        resp, manifest = await self._request(
            RegistryClient.ManifestFetchFailed, url,
            Authorization='Bearer ' + token, Accept=MANIFEST_V2_MEDIA_TYPE
        )
        if resp.status != 200:
            raise RegistryClient.ManifestFetchFailed(status_line(resp))
        return manifest

    async def publish_manifest(self, token: str, name: str, reference: str,
                               manifest: bytes) -> None:
        """
        Put `manifest` verbatim as `name` at `reference`.

        Raises:
            ManifestPublishFailed: registry did not answer 201
        """
        url = self.manifest_url(name, reference)
        self.logger.debug("push manifest to %s", url)

        resp, _ = await self._request(
            RegistryClient.ManifestPublishFailed, url,
            method='PUT', data=manifest,
            **{'Authorization': 'Bearer ' + token,
               'Content-Type': MANIFEST_V2_MEDIA_TYPE}
        )
        if resp.status != 201:
            raise RegistryClient.ManifestPublishFailed(status_line(resp))

    async def retag(self, operation: ResolvedOperation,
                    username: str, password: str) -> bytes:
        """
        Authenticate, fetch manifest of source and publish it as target.
        Steps run one after another, first failure aborts the rest.

        Returns:
            bytes: manifest which was copied
        """
        token = await self.authenticate(operation.name, username, password)
        manifest = await self.fetch_manifest(token, operation.name, operation.source)
        await self.publish_manifest(token, operation.name, operation.target, manifest)
        self.logger.debug("copied %d bytes of manifest from %s to %s",
                          len(manifest), operation.source_ref, operation.target_ref)
        return manifest
