# utils.py -- Test utilities for gitreplay
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

"""Utility functions for building source histories in tests."""

import os
import shutil
import tempfile

from dulwich.index import commit_tree
from dulwich.objects import Blob, Commit
from dulwich.repo import MemoryRepo, Repo

# Plain old file
F = 0o100644
X = 0o100755

DEFAULT_TIME = 1262304000  # 2010-01-01 00:00:00 UTC
AUTHOR = b"Test Author <author@example.com>"
COMMITTER = b"Replay Bot <replay@example.com>"


def make_commit(**attrs) -> Commit:
    """Make a Commit object with a default set of members.

    Args:
      attrs: Attributes to overwrite from the default values
    Returns: A newly initialized Commit object
    """
    all_attrs = {
        "author": AUTHOR,
        "author_time": DEFAULT_TIME,
        "author_timezone": 0,
        "committer": b"Test Committer <committer@example.com>",
        "commit_time": DEFAULT_TIME,
        "commit_timezone": 0,
        "message": b"Test message.",
        "parents": [],
        "tree": b"0" * 40,
    }
    all_attrs.update(attrs)
    c = Commit()
    for name, value in all_attrs.items():
        setattr(c, name, value)
    return c


def build_history(object_store, trees, attrs=None) -> list[Commit]:
    """Build a linear history from a list of tree contents.

    Args:
      object_store: Object store to add the objects to
      trees: One dict per commit, oldest first, mapping tree paths to
        contents or to (contents, mode) tuples
      attrs: Optional dict of commit number -> dict of attributes for that
        commit
    Returns: The commits, oldest first
    """
    if attrs is None:
        attrs = {}
    commits: list[Commit] = []
    for i, files in enumerate(trees):
        entries = []
        for path, value in files.items():
            if isinstance(value, tuple):
                data, mode = value
            else:
                data, mode = value, F
            blob = Blob.from_string(data)
            object_store.add_object(blob)
            entries.append((path, blob.id, mode))
        commit_attrs = {
            "tree": commit_tree(object_store, entries),
            "parents": [commits[-1].id] if commits else [],
            "message": b"Commit %d\n" % i,
            "author_time": DEFAULT_TIME + 100 * i,
            "commit_time": DEFAULT_TIME + 100 * i,
        }
        commit_attrs.update(attrs.get(i, {}))
        commit = make_commit(**commit_attrs)
        object_store.add_object(commit)
        commits.append(commit)
    return commits


def memory_source(trees, branch: bytes = b"master", attrs=None):
    """Create an in-memory repository with a linear history.

    Returns: Tuple of the repository and its commits, oldest first
    """
    repo = MemoryRepo()
    commits = build_history(repo.object_store, trees, attrs)
    if commits:
        repo.refs[b"refs/heads/" + branch] = commits[-1].id
    return repo, commits


def disk_source(path: str, trees, branch: bytes = b"master", attrs=None):
    """Create an on-disk repository with a linear history.

    Returns: Tuple of the repository and its commits, oldest first
    """
    repo = Repo.init(path, mkdir=True)
    commits = build_history(repo.object_store, trees, attrs)
    if commits:
        repo.refs[b"refs/heads/" + branch] = commits[-1].id
    return repo, commits


def make_tempdir(testcase) -> str:
    """Create a temporary directory removed when the test finishes."""
    path = tempfile.mkdtemp()
    testcase.addCleanup(shutil.rmtree, path)
    return path


def read_file(root: str, path: str) -> bytes:
    with open(os.path.join(root, path), "rb") as f:
        return f.read()
