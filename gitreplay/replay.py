# replay.py -- Replay a branch's history into a new repository
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

"""Replaying of commit history.

Commits are replayed strictly oldest first: the tree of each source commit is
copied into the target working tree and committed on top of the commit
created for its predecessor. The first error stops the run; commits created
up to that point remain in the target repository.

Example::

    >>> from gitreplay.replay import replicate
    >>> result = replicate("path/to/source", "path/to/copy")  # doctest: +SKIP
    >>> result.head  # doctest: +SKIP
"""

__all__ = [
    "ReplicationDriver",
    "ReplicationResult",
    "ReplicationState",
    "replicate",
]

import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from dulwich.objects import Commit

from .cache import ObjectCache
from .commit import CommitBuilder
from .config import ReplicationConfig
from .copier import TreeCopier
from .errors import ReplicationCancelled, ReplicationError, ReplicationFailed
from .log_utils import getLogger
from .stores import SourceStore, TargetStore
from .walk import HistoryWalker

logger = getLogger(__name__)


class ReplicationState(Enum):
    """States of a replication run."""

    IDLE = "idle"
    REPLAYING = "replaying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ReplicationResult:
    """Outcome of a replication run."""

    # (source commit id, target commit id), oldest first
    commits: list[tuple[bytes, bytes]] = field(default_factory=list)
    state: ReplicationState = ReplicationState.IDLE
    blobs_written: int = 0
    blobs_skipped: int = 0
    error: ReplicationError | None = None

    @property
    def last_index(self) -> int:
        """Index of the last replicated source commit, or -1."""
        return len(self.commits) - 1

    @property
    def head(self) -> bytes | None:
        """Id of the most recent target commit."""
        if not self.commits:
            return None
        return self.commits[-1][1]


class ReplicationDriver:
    """Replays a sequence of source commits into a target repository.

    A driver runs once. Its :class:`ObjectCache` lives as long as the driver,
    so blobs are never written twice to the same path with the same
    contents.
    """

    def __init__(
        self,
        source: SourceStore,
        target: TargetStore,
        committer: bytes | None = None,
        cache: ObjectCache | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Initialize a ReplicationDriver.

        Args:
          source: Repository the commits are read from
          target: Freshly initialized repository to replay into
          committer: Committer identity for the new commits; looked up in
            the target's configuration when not given
          cache: Record of written blobs; a new one by default
          cancel_event: Event that stops the run at the next commit boundary
            once set
        """
        self.source = source
        self.target = target
        self.committer = committer
        self.cache = ObjectCache() if cache is None else cache
        self.copier = TreeCopier(source, target, self.cache)
        self.state = ReplicationState.IDLE
        self.index: int | None = None
        self.result = ReplicationResult()
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()

    def cancel(self) -> None:
        """Request the run to stop before the next commit is replayed.

        Safe to call from a signal handler.
        """
        self._cancel_event.set()

    def run(self, commits: Sequence[Commit]) -> ReplicationResult:
        """Replay commits, oldest first.

        Args:
          commits: Source commits, each the first parent of the next
        Returns: Result with the created commits
        Raises:
          ReplicationFailed: if any commit could not be replayed; the
            original error is chained as ``__cause__``
        """
        if self.state is not ReplicationState.IDLE:
            raise ValueError(f"driver already ran (state {self.state.value})")
        result = self.result
        parents: list[bytes] = []
        try:
            builder = CommitBuilder(self.target, self.committer)
            for i, commit in enumerate(commits):
                if self._cancel_event.is_set():
                    raise ReplicationCancelled(
                        f"cancelled before source commit {i} of {len(commits)}"
                    )
                self.state = result.state = ReplicationState.REPLAYING
                self.index = i
                staged = self.copier.copy_tree(commit.tree)
                new_id = builder.build_commit(staged, commit, parents)
                result.commits.append((commit.id, new_id))
                parents = [new_id]
                logger.info(
                    "[%d/%d] %s -> %s",
                    i + 1,
                    len(commits),
                    commit.id.decode("ascii"),
                    new_id.decode("ascii"),
                )
        except ReplicationError as e:
            self.state = result.state = ReplicationState.FAILED
            result.error = e
            raise ReplicationFailed(result.last_index, result) from e
        finally:
            result.blobs_written = self.copier.blobs_written
            result.blobs_skipped = self.copier.blobs_skipped
        self.state = result.state = ReplicationState.DONE
        logger.info(
            "replicated %d commits (%d blobs written, %d unchanged)",
            len(result.commits),
            result.blobs_written,
            result.blobs_skipped,
        )
        return result


def replicate(
    source_path: str | os.PathLike,
    target_path: str | os.PathLike,
    committer: bytes | None = None,
    config: ReplicationConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> ReplicationResult:
    """Replicate the history of a repository into a new repository.

    Args:
      source_path: Path of the repository to read
      target_path: Path to create the new repository at
      committer: Committer identity; overrides ``config.committer``
      config: Replication settings; read from the source repository's
        configuration when not given
      cancel_event: Event that stops the run at the next commit boundary
    Returns: Result of the run
    Raises:
      BranchNotFound: if none of the configured branches exist; the target
        is not created in that case
      ReplicationFailed: if replaying a commit failed
    """
    source = SourceStore.open(source_path)
    try:
        if config is None:
            config = ReplicationConfig.from_config(source.repo.get_config_stack())
        if committer is None:
            committer = config.committer

        walker = HistoryWalker(source, config.branches)
        commits = walker.walk()
        target = TargetStore.init_repository(target_path, branch=walker.branch)
        try:
            driver = ReplicationDriver(
                source, target, committer=committer, cancel_event=cancel_event
            )
            return driver.run(commits)
        finally:
            target.close()
    finally:
        source.close()
