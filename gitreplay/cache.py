# cache.py -- Record of content already copied to the target tree
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

"""Cache of blob ids last written to each path of the target tree."""

__all__ = ["ObjectCache"]

from collections.abc import Iterator


class ObjectCache:
    """Maps tree paths to the blob id last written there.

    If ``path`` maps to ``sha``, the target working tree currently holds
    exactly the contents of blob ``sha`` at ``path``. Entries are never
    removed; the cache lives as long as one replication run.
    """

    def __init__(self) -> None:
        self._entries: dict[bytes, bytes] = {}

    def lookup(self, path: bytes) -> bytes | None:
        """Return the blob id last recorded for path, if any."""
        return self._entries.get(path)

    def record(self, path: bytes, sha: bytes) -> None:
        """Record that the blob ``sha`` was written to ``path``."""
        self._entries[path] = sha

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._entries)} paths)"
