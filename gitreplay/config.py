# config.py -- Replication settings
# Copyright (C) 2026 The gitreplay Authors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# gitreplay is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""Replication settings, read from git configuration.

Recognized settings::

    [replicate]
        branch = master
        branch = main
    [user]
        name = Jane Doe
        email = jane@example.com

``replicate.branch`` may be given several times; the branches are tried in
order. ``user.name`` and ``user.email`` give the committer identity unless
``GIT_COMMITTER_NAME`` and ``GIT_COMMITTER_EMAIL`` are set.
"""

__all__ = [
    "DEFAULT_BRANCHES",
    "ReplicationConfig",
    "resolve_committer",
]

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dulwich.config import Config
from dulwich.repo import InvalidUserIdentity, check_user_identity

from .errors import MissingIdentity

DEFAULT_BRANCHES = ("master", "main")


def _get_str(config: Config | None, section: bytes, name: bytes) -> str | None:
    if config is None:
        return None
    try:
        value = config.get((section,), name)
    except KeyError:
        return None
    return value.decode("utf-8")


def resolve_committer(
    config: Config | None = None,
    name: str | None = None,
    email: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> bytes:
    """Determine the committer identity for replicated commits.

    Each of name and email is taken from the arguments, then from
    ``GIT_COMMITTER_NAME``/``GIT_COMMITTER_EMAIL``, then from ``user.name``/
    ``user.email`` in config. Unlike git itself there is no fallback to the
    identity of the local system user.

    Returns: Identity as ``b"Name <email>"``
    Raises:
      MissingIdentity: if name or email cannot be determined, or they do not
        form a valid identity
    """
    if environ is None:
        environ = os.environ
    if name is None:
        name = environ.get("GIT_COMMITTER_NAME") or _get_str(config, b"user", b"name")
    if email is None:
        email = environ.get("GIT_COMMITTER_EMAIL") or _get_str(
            config, b"user", b"email"
        )
    if not name:
        raise MissingIdentity("no committer name configured (user.name)")
    if not email:
        raise MissingIdentity("no committer email configured (user.email)")
    if email.startswith("<") and email.endswith(">"):
        email = email[1:-1]
    identity = f"{name} <{email}>".encode()
    try:
        check_user_identity(identity)
    except InvalidUserIdentity as e:
        raise MissingIdentity(f"invalid committer identity {identity!r}") from e
    return identity


@dataclass
class ReplicationConfig:
    """Settings for one replication run."""

    branches: tuple[str, ...] = DEFAULT_BRANCHES
    committer: bytes | None = None

    @classmethod
    def from_config(cls, config: Config) -> "ReplicationConfig":
        """Read settings from a git configuration.

        The committer is not resolved here, so that a missing identity only
        becomes an error once a commit is about to be created.
        """
        try:
            branches = tuple(
                value.decode("utf-8")
                for value in config.get_multivar((b"replicate",), b"branch")
            )
        except KeyError:
            branches = ()
        return cls(branches=branches or DEFAULT_BRANCHES)
