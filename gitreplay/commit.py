# commit.py -- Recreate source commits in the target repository
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

"""Creation of replayed commits."""

__all__ = ["CommitBuilder"]

from collections.abc import Sequence

from dulwich.objects import Commit, TreeEntry

from .config import resolve_committer
from .log_utils import getLogger
from .stores import TargetStore

logger = getLogger(__name__)


class CommitBuilder:
    """Turns staged working tree changes into commits in the target.

    Author, author date, encoding and message of each new commit are copied
    from the source commit. The committer is whoever runs the replication;
    the commit date is kept from the source commit so that replaying the
    same history twice gives the same commit ids.
    """

    def __init__(self, target: TargetStore, committer: bytes | None = None) -> None:
        """Initialize a CommitBuilder.

        Args:
          target: Repository to create commits in
          committer: Committer identity; read from the environment and the
            target's configuration when not given
        Raises:
          MissingIdentity: if no committer identity is available
        """
        self.target = target
        if committer is None:
            committer = resolve_committer(target.repo.get_config_stack())
        self.committer = committer

    def build_commit(
        self,
        staged: Sequence[TreeEntry],
        source_commit: Commit,
        parents: Sequence[bytes],
    ) -> bytes:
        """Commit the staged files on top of parents.

        Args:
          staged: Entries of the files written to the working tree, or
            whose mode changed, since the last commit
          source_commit: Commit whose author and message are copied
          parents: Ids of the target commits to use as parents
        Returns: Id of the new target commit, which HEAD now points at
        """
        self.target.stage_entries(staged)
        tree_id = self.target.write_tree_from_index()
        commit_id = self.target.create_commit(
            tree_id,
            parents,
            author=source_commit.author,
            committer=self.committer,
            message=source_commit.message,
            author_time=source_commit.author_time,
            author_timezone=source_commit.author_timezone,
            commit_time=source_commit.commit_time,
            commit_timezone=source_commit.commit_timezone,
            encoding=source_commit.encoding,
        )
        logger.debug(
            "created commit %s with tree %s (%d paths staged)",
            commit_id.decode("ascii"),
            tree_id.decode("ascii"),
            len(staged),
        )
        return commit_id
