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
Resolve command line arguments into a canonical image name, a source
reference and a target reference which are acceptable to use in
registry API urls.
"""

import re
from typing import NamedTuple, Optional, Sequence, Tuple, Union

from docker_retag import RetagError

DEFAULT_DOMAIN_PREFIX = "docker.io/"
OFFICIAL_REPO = "library"
DEFAULT_TAG = "latest"

DIGEST_ALGORITHM = "sha256"
DIGEST_PREFIX = DIGEST_ALGORITHM + ":"

# https://github.com/docker/distribution/blob/master/reference/regexp.go
TAG_REGEX = re.compile(r':?([A-Za-z0-9_][A-Za-z0-9_.-]{0,127})')

# only sha256 is accepted, which is stricter than the distribution grammar
DIGEST_REGEX = re.compile(r'(@|sha256:|@sha256:)([0-9a-f]{64})')


class ResolutionError(RetagError):
    """Arguments cannot be resolved into a retag operation"""
    message = "cannot resolve arguments"

    def __init__(self, message: str = None) -> None:
        super().__init__(message or self.message)


class InvalidArguments(ResolutionError):
    """Wrong number of arguments"""
    message = "invalid arguments"


class InvalidImageName(ResolutionError):
    """Image name is not <repo> or <org>/<repo>"""
    message = "invalid image name"


class InvalidSourceReference(ResolutionError):
    """Source is neither a tag nor a sha256 digest"""
    message = "invalid source reference"


class InvalidTargetReference(ResolutionError):
    """Target is not a tag"""
    message = "invalid target reference"


class Tag(str):
    """Canonical tag, e.g. ``1.2.3``"""
    separator = ":"


class Digest(str):
    """Canonical digest, e.g. ``sha256:0123...``"""
    separator = "@"


Reference = Union[Tag, Digest]


class ResolvedOperation(NamedTuple):
    """Canonical (name, source, target) triple of a retag operation"""
    name: str
    source: Reference
    target: Tag

    @property
    def source_ref(self) -> str:
        """Source image as ``<name>:<tag>`` or ``<name>@<digest>``"""
        return self.name + self.source.separator + self.source

    @property
    def target_ref(self) -> str:
        """Target image as ``<name>:<tag>``"""
        return self.name + self.target.separator + self.target


def resolve(args: Sequence[str]) -> ResolvedOperation:
    """
    Resolve the given arguments into a canonical retag operation.

    Accepted forms are ``[name, source, target]`` and
    ``[name[:tag|@digest], target]``. Name, source and target are
    validated in that order and the first failing one is reported.

    Args:
        args: raw command line arguments

    Returns:
        ResolvedOperation: canonical name, source and target

    Raises:
        InvalidArguments: number of arguments is not 2 or 3
        InvalidImageName: name is not a valid image name
        InvalidSourceReference: source is neither a tag nor a digest
        InvalidTargetReference: target is not a tag

    """
    args = list(args or [])

    if len(args) == 3:
        raw_name, raw_source, raw_target = args
    elif len(args) == 2:
        raw_name, raw_source = split_image_ref(args[0])
        raw_target = args[1]
    else:
        raise InvalidArguments()

    name = maybe_name(raw_name)
    if name is None:
        raise InvalidImageName()

    source = maybe_sha256_digest(raw_source) or maybe_tag(raw_source)
    if source is None:
        raise InvalidSourceReference()

    target = maybe_tag(raw_target)
    if target is None:
        raise InvalidTargetReference()

    return ResolvedOperation(name, source, target)


def split_image_ref(arg: str) -> Tuple[str, str]:
    """Split the given arg into the name and reference components.
    If there is no reference, the tag :latest is used.

    Neither component is canonical, they must be passed to
    maybe_name and maybe_sha256_digest/maybe_tag respectively.

    Args:
        arg (str): <name>, <name>:<tag> or <name>@<digest>
    """
    # example/image@sha256:acd...def
    name, sign, suffix = arg.partition("@")
    if sign:
        return name, sign + suffix

    # example/image:1.2.3
    name, sign, suffix = arg.partition(":")
    if sign:
        return name, sign + suffix

    return arg, ":" + DEFAULT_TAG


def maybe_name(arg: str) -> Optional[str]:
    """Return canonical ``<org>/<repo>`` name, or None if arg does not
    look like an image name.

    A leading ``docker.io/`` is stripped and official images without
    an organization get the ``library`` organization.
    """
    if arg.startswith(DEFAULT_DOMAIN_PREFIX):
        arg = arg[len(DEFAULT_DOMAIN_PREFIX):]

    chunks = arg.split("/")
    if len(chunks) == 1:
        org, repo = OFFICIAL_REPO, chunks[0]
    elif len(chunks) == 2:
        org, repo = chunks
    else:
        return None

    if not org or not repo:
        return None
    return org + "/" + repo


def maybe_tag(arg: str) -> Optional[Tag]:
    """Return canonical tag with any leading ``:`` removed, or None"""
    match = TAG_REGEX.fullmatch(arg)
    if match is None:
        return None
    return Tag(match.group(1))


def maybe_sha256_digest(arg: str) -> Optional[Digest]:
    """Return canonical ``sha256:<hex>`` digest, or None.

    ``@<hex>``, ``sha256:<hex>`` and ``@sha256:<hex>`` are accepted.
    """
    match = DIGEST_REGEX.fullmatch(arg)
    if match is None:
        return None
    return Digest(DIGEST_PREFIX + match.group(2))
