# copier.py -- Mirror source trees into the target working tree
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

"""Copying of source trees into the target working tree.

Only blobs whose id differs from the one last written to the same path are
read and written; everything else is skipped. A file whose contents are
unchanged but whose executable bit flipped only has its mode updated. Paths
removed from the source tree are left alone.
"""

__all__ = ["TreeCopier", "entry_kind"]

import posixpath
import stat

from dulwich.objects import Blob, Tree, TreeEntry

from .cache import ObjectCache
from .errors import UnsupportedObjectKind
from .log_utils import getLogger
from .stores import SourceStore, TargetStore

logger = getLogger(__name__)


def entry_kind(mode: int) -> type[Blob] | type[Tree] | None:
    """Determine what kind of object a tree entry refers to.

    Args:
      mode: Mode of the tree entry
    Returns: ``Tree`` for directories, ``Blob`` for regular files and None
      for anything else (symlinks, submodules)
    """
    if stat.S_ISDIR(mode):
        return Tree
    if stat.S_ISREG(mode):
        return Blob
    return None


class TreeCopier:
    """Copies the trees of successive commits into a target working tree."""

    def __init__(
        self, source: SourceStore, target: TargetStore, cache: ObjectCache
    ) -> None:
        """Initialize a TreeCopier.

        Args:
          source: Store to read trees and blobs from
          target: Store whose working tree is written to
          cache: Record of blobs already written, shared by all calls
        """
        self.source = source
        self.target = target
        self.cache = cache
        # Mode each cached path was last staged with
        self._modes: dict[bytes, int] = {}
        self.blobs_written = 0
        self.blobs_skipped = 0

    def copy_tree(self, tree_id: bytes, prefix: bytes = b"") -> list[TreeEntry]:
        """Copy a tree into the target working tree.

        Args:
          tree_id: Id of the source tree
          prefix: Tree path the tree is copied to; empty for the root
        Returns: Entries (full path, mode, blob id) of the files that were
          written or changed mode, which still need to be staged
        Raises:
          UnsupportedObjectKind: for symlinks, submodules and other entries
            that are neither files nor directories
        """
        staged: list[TreeEntry] = []
        for entry in self.source.tree_entries(tree_id):
            staged.extend(self._copy_entry(entry, prefix))
        return staged

    def _copy_entry(self, entry: TreeEntry, prefix: bytes) -> list[TreeEntry]:
        path = posixpath.join(prefix, entry.path) if prefix else entry.path
        kind = entry_kind(entry.mode)
        if kind is Tree:
            self.target.create_directory(path)
            return self.copy_tree(entry.sha, path)
        if kind is Blob:
            if self.cache.lookup(path) == entry.sha:
                self.blobs_skipped += 1
                if self._modes.get(path) == entry.mode:
                    logger.debug("unchanged %s", path.decode("utf-8", "replace"))
                    return []
                self.target.set_mode(path, entry.mode)
                self._modes[path] = entry.mode
                logger.debug(
                    "mode of %s changed to %06o",
                    path.decode("utf-8", "replace"),
                    entry.mode,
                )
                return [TreeEntry(path, entry.mode, entry.sha)]
            data = self.source.read_blob(entry.sha)
            blob_id = self.target.write_file(path, data, entry.mode)
            self.cache.record(path, blob_id)
            self._modes[path] = entry.mode
            self.blobs_written += 1
            logger.debug("wrote %s (%d bytes)", path.decode("utf-8", "replace"), len(data))
            return [TreeEntry(path, entry.mode, blob_id)]
        raise UnsupportedObjectKind(path, entry.mode)
