# errors.py -- Exception classes for gitreplay
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

"""Exception classes raised while replicating history."""

__all__ = [
    "BranchNotFound",
    "ContentReadFailure",
    "ContentWriteFailure",
    "MissingIdentity",
    "NoSuchParent",
    "NonLinearHistoryWarning",
    "ReplicationCancelled",
    "ReplicationError",
    "ReplicationFailed",
    "UnsupportedObjectKind",
]

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .replay import ReplicationResult


def _display(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return value


class ReplicationError(Exception):
    """Base class for all replication errors."""


class BranchNotFound(ReplicationError):
    """None of the candidate branches exist in the source repository."""

    def __init__(self, candidates: Sequence[str]) -> None:
        """Initialize a BranchNotFound exception.

        Args:
          candidates: Branch names that were tried, in preference order
        """
        self.candidates = tuple(candidates)
        super().__init__(
            "no branch found; tried: " + ", ".join(self.candidates or ("(none)",))
        )


class NoSuchParent(ReplicationError):
    """A commit does not have a parent at the requested index."""

    def __init__(self, commit_id: bytes, index: int) -> None:
        self.commit_id = commit_id
        self.index = index
        super().__init__(f"commit {_display(commit_id)} has no parent {index}")


class UnsupportedObjectKind(ReplicationError):
    """A tree entry is neither a regular file nor a directory.

    Symlinks and submodules (gitlinks) fall in this category.
    """

    def __init__(self, path: bytes, mode: int) -> None:
        self.path = path
        self.mode = mode
        super().__init__(
            f"unsupported tree entry {_display(path)} with mode {mode:06o}"
        )


class ContentReadFailure(ReplicationError):
    """An object could not be read from the source repository."""

    def __init__(self, object_id: bytes, reason: str | None = None) -> None:
        self.object_id = object_id
        message = f"unable to read object {_display(object_id)}"
        if reason is not None:
            message += f": {reason}"
        super().__init__(message)


class ContentWriteFailure(ReplicationError):
    """Content could not be written to the target repository."""

    def __init__(self, path: bytes | str, reason: str | None = None) -> None:
        self.path = path
        message = f"unable to write {_display(path)}"
        if reason is not None:
            message += f": {reason}"
        super().__init__(message)


class MissingIdentity(ReplicationError):
    """No committer identity is available for the target repository."""


class ReplicationCancelled(ReplicationError):
    """Replication stopped at a commit boundary because it was cancelled."""


class ReplicationFailed(ReplicationError):
    """The replication run was aborted.

    The underlying error is available as ``__cause__``. Target commits
    created before the failure are left in place.
    """

    def __init__(self, last_index: int, result: "ReplicationResult") -> None:
        """Initialize a ReplicationFailed exception.

        Args:
          last_index: Index of the last source commit that was replicated,
            or -1 if none was
          result: Partial result of the run
        """
        self.last_index = last_index
        self.result = result
        if last_index < 0:
            message = "replication failed before any commit was replicated"
        else:
            message = f"replication failed after source commit {last_index}"
        if result.error is not None:
            message += f": {result.error}"
        super().__init__(message)


class NonLinearHistoryWarning(UserWarning):
    """A merge commit was found; only its first parent is followed."""
