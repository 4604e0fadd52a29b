# walk.py -- Determine the commits to replay
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

"""First-parent history walking."""

__all__ = ["HistoryWalker"]

import warnings
from collections.abc import Sequence

from dulwich.objects import Commit

from .config import DEFAULT_BRANCHES
from .errors import NonLinearHistoryWarning
from .log_utils import getLogger
from .stores import SourceStore

logger = getLogger(__name__)


def _warn_skipped_parents(commit: Commit) -> None:
    for parent_id in commit.parents[1:]:
        logger.warning(
            "commit %s is a merge; not following parent %s",
            commit.id.decode("ascii"),
            parent_id.decode("ascii"),
        )
        warnings.warn(
            f"commit {commit.id.decode('ascii')} is a merge; "
            f"parent {parent_id.decode('ascii')} is not replicated",
            NonLinearHistoryWarning,
            stacklevel=2,
        )


class HistoryWalker:
    """Finds the commits of a branch that need to be replayed.

    Only the first parent of each commit is followed. Every other parent of
    a merge commit results in a :class:`NonLinearHistoryWarning`.
    """

    def __init__(
        self, source: SourceStore, branches: Sequence[str] = DEFAULT_BRANCHES
    ) -> None:
        """Initialize a HistoryWalker.

        Args:
          source: Repository to walk
          branches: Candidate branch names in order of preference
        """
        self.source = source
        self.branches = tuple(branches)
        self.branch: str | None = None

    def walk(self) -> list[Commit]:
        """Return the commits of the branch, oldest first.

        Raises:
          BranchNotFound: if none of the candidate branches exist
        """
        self.branch, head = self.source.resolve_branch(self.branches)
        logger.debug(
            "walking branch %s from %s", self.branch, head.id.decode("ascii")
        )
        commits = []
        commit = head
        while True:
            commits.append(commit)
            _warn_skipped_parents(commit)
            if not commit.parents:
                break
            commit = self.source.parent(commit, 0)
        commits.reverse()
        logger.info("found %d commits on branch %s", len(commits), self.branch)
        return commits
