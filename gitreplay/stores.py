# stores.py -- Access to the source and target repositories
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

"""Thin adapters over dulwich repositories.

The replication engine never talks to dulwich directly. It reads from a
:class:`SourceStore` and writes through a :class:`TargetStore`, which turn
dulwich and filesystem errors into the exceptions in :mod:`gitreplay.errors`.
"""

__all__ = [
    "SourceStore",
    "TargetStore",
]

import os
import stat
from collections.abc import Iterable, Sequence

from dulwich.errors import ObjectFormatException
from dulwich.index import index_entry_from_stat, validate_path
from dulwich.objects import Blob, Commit, ShaFile, Tree, TreeEntry
from dulwich.refs import HEADREF, LOCAL_BRANCH_PREFIX
from dulwich.repo import CONTROLDIR, BaseRepo, Repo

from .errors import (
    BranchNotFound,
    ContentReadFailure,
    ContentWriteFailure,
    NoSuchParent,
)
from .log_utils import getLogger

logger = getLogger(__name__)


def _strerror(e: OSError) -> str:
    return e.strerror or str(e)


def _fs_mode(mode: int) -> int:
    return 0o755 if mode & stat.S_IXUSR else 0o644


class SourceStore:
    """Read-only view of the repository whose history is replicated."""

    def __init__(self, repo: BaseRepo) -> None:
        """Initialize a SourceStore.

        Args:
          repo: Repository to read from; may be bare or in memory
        """
        self.repo = repo
        self.object_store = repo.object_store

    @classmethod
    def open(cls, path: str | os.PathLike) -> "SourceStore":
        """Open the repository at path.

        Raises:
          NotGitRepository: if path is not a git repository
        """
        return cls(Repo(os.fspath(path)))

    def _get(self, sha: bytes, cls: type[ShaFile]) -> ShaFile:
        try:
            obj = self.object_store[sha]
        except KeyError as e:
            raise ContentReadFailure(sha, "object not found") from e
        except (OSError, ObjectFormatException) as e:
            raise ContentReadFailure(sha, str(e)) from e
        if not isinstance(obj, cls):
            raise ContentReadFailure(
                sha,
                f"expected {cls.type_name.decode('ascii')}, "
                f"got {obj.type_name.decode('ascii')}",
            )
        return obj

    def resolve_branch(self, candidates: Sequence[str]) -> tuple[str, Commit]:
        """Find the head commit of the first existing branch.

        Args:
          candidates: Branch names (without ``refs/heads/``) in preference
            order
        Returns: Tuple with the name of the branch and its head commit
        Raises:
          BranchNotFound: if none of the candidates exist
        """
        for name in candidates:
            ref = LOCAL_BRANCH_PREFIX + name.encode("utf-8")
            try:
                sha = self.repo.refs[ref]
            except KeyError:
                logger.debug("branch %s not found in source", name)
                continue
            return name, self.get_commit(sha)
        raise BranchNotFound(candidates)

    def get_commit(self, sha: bytes) -> Commit:
        """Retrieve a commit by id."""
        return self._get(sha, Commit)

    def parent(self, commit: Commit, index: int = 0) -> Commit:
        """Retrieve a parent of a commit.

        Raises:
          NoSuchParent: if commit has fewer than ``index + 1`` parents
        """
        try:
            parent_id = commit.parents[index]
        except IndexError:
            raise NoSuchParent(commit.id, index) from None
        return self.get_commit(parent_id)

    def tree_entries(self, sha: bytes) -> list[TreeEntry]:
        """List the entries of a tree, in serialization order."""
        tree = self._get(sha, Tree)
        return list(tree.iteritems())

    def read_blob(self, sha: bytes) -> bytes:
        """Read the full contents of a blob."""
        return self._get(sha, Blob).as_raw_string()

    def close(self) -> None:
        """Close any files opened by the repository."""
        self.repo.close()


class TargetStore:
    """Writable repository with a working tree that history is replayed into."""

    def __init__(self, repo: Repo) -> None:
        self.repo = repo
        self.path = repo.path
        self._root = os.fsencode(repo.path)

    @classmethod
    def init_repository(
        cls, path: str | os.PathLike, branch: str | None = None
    ) -> "TargetStore":
        """Create a new repository at path.

        Args:
          path: Directory for the new repository; created if missing
          branch: Name of the branch HEAD should point at
        Raises:
          FileExistsError: if path already contains a repository
        """
        path = os.fspath(path)
        if os.path.exists(os.path.join(path, CONTROLDIR)):
            raise FileExistsError(f"{path} already contains a git repository")
        repo = Repo.init(path, mkdir=not os.path.exists(path))
        if branch is not None:
            repo.refs.set_symbolic_ref(HEADREF, LOCAL_BRANCH_PREFIX + branch.encode("utf-8"))
        logger.debug("initialized target repository at %s", path)
        return cls(repo)

    def _fs_path(self, path: bytes) -> bytes:
        if not validate_path(path):
            raise ContentWriteFailure(path, "invalid path")
        return os.path.join(self._root, path.replace(b"/", os.sep.encode()))

    def write_file(self, path: bytes, data: bytes, mode: int = 0o100644) -> bytes:
        """Write a file in the working tree, replacing any existing one.

        The contents are also stored as a blob, byte for byte, so that
        staging never has to read the file back.

        Args:
          path: Tree path relative to the repository root
          data: File contents
          mode: Git file mode; only the executable bit is honoured
        Returns: Id of the blob holding data
        """
        full_path = self._fs_path(path)
        blob = Blob.from_string(data)
        try:
            self.repo.object_store.add_object(blob)
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "wb") as f:
                f.write(data)
            os.chmod(full_path, _fs_mode(mode))
        except OSError as e:
            raise ContentWriteFailure(path, _strerror(e)) from e
        return blob.id

    def set_mode(self, path: bytes, mode: int) -> None:
        """Change the executable bit of a file in the working tree."""
        full_path = self._fs_path(path)
        try:
            os.chmod(full_path, _fs_mode(mode))
        except OSError as e:
            raise ContentWriteFailure(path, _strerror(e)) from e

    def create_directory(self, path: bytes) -> None:
        """Create a directory in the working tree; no-op if it exists."""
        full_path = self._fs_path(path)
        try:
            os.makedirs(full_path, exist_ok=True)
        except OSError as e:
            raise ContentWriteFailure(path, _strerror(e)) from e

    def stage_entries(self, entries: Iterable[TreeEntry]) -> None:
        """Record files in the index with the given blob ids and modes.

        The blobs must already be in the object store. Files are only
        stat'ed, never re-read, so no checkin filters (``.gitattributes``,
        ``core.autocrlf``) apply.

        Args:
          entries: Entries with the full tree path of each file
        """
        entries = list(entries)
        if not entries:
            return
        try:
            index = self.repo.open_index()
            for entry in entries:
                st = os.lstat(self._fs_path(entry.path))
                index[entry.path] = index_entry_from_stat(st, entry.sha, mode=entry.mode)
            index.write()
        except OSError as e:
            raise ContentWriteFailure(b"index", _strerror(e)) from e

    def write_tree_from_index(self) -> bytes:
        """Write the tree described by the index; returns its id."""
        try:
            return self.repo.open_index().commit(self.repo.object_store)
        except OSError as e:
            raise ContentWriteFailure(b"index", _strerror(e)) from e

    def create_commit(
        self,
        tree: bytes,
        parents: Sequence[bytes],
        author: bytes,
        committer: bytes,
        message: bytes,
        *,
        author_time: int,
        author_timezone: int,
        commit_time: int,
        commit_timezone: int,
        encoding: bytes | None = None,
    ) -> bytes:
        """Create a commit and advance HEAD to it.

        HEAD is only moved if it still points at ``parents[0]`` (or does not
        exist yet, for a root commit).

        Returns: Id of the new commit
        """
        c = Commit()
        c.tree = tree
        c.parents = list(parents)
        c.author = author
        c.author_time = author_time
        c.author_timezone = author_timezone
        c.committer = committer
        c.commit_time = commit_time
        c.commit_timezone = commit_timezone
        if encoding is not None:
            c.encoding = encoding
        c.message = message

        reflog_message = b"commit (replay): " + message.split(b"\n", 1)[0]
        try:
            self.repo.object_store.add_object(c)
            if parents:
                ok = self.repo.refs.set_if_equals(
                    HEADREF,
                    parents[0],
                    c.id,
                    message=reflog_message,
                    committer=committer,
                    timestamp=commit_time,
                    timezone=commit_timezone,
                )
            else:
                ok = self.repo.refs.add_if_new(
                    HEADREF,
                    c.id,
                    message=reflog_message,
                    committer=committer,
                    timestamp=commit_time,
                    timezone=commit_timezone,
                )
        except OSError as e:
            raise ContentWriteFailure(HEADREF, _strerror(e)) from e
        if not ok:
            raise ContentWriteFailure(HEADREF, "HEAD changed during commit")
        return c.id

    def head(self) -> bytes | None:
        """Return the commit HEAD points at, or None for an unborn branch."""
        try:
            return self.repo.refs[HEADREF]
        except KeyError:
            return None

    def close(self) -> None:
        """Close any files opened by the repository."""
        self.repo.close()
