# test_stores.py -- Tests for the repository adapters
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

"""Tests for gitreplay.stores."""

import os
import stat

from dulwich.objects import Blob, TreeEntry
from dulwich.repo import Repo

from gitreplay.errors import (
    BranchNotFound,
    ContentReadFailure,
    ContentWriteFailure,
    NoSuchParent,
)
from gitreplay.stores import SourceStore, TargetStore

from . import TestCase
from .utils import AUTHOR, COMMITTER, F, X, make_tempdir, memory_source, read_file


class SourceStoreTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.repo, self.commits = memory_source(
            [{b"a.txt": b"x"}, {b"a.txt": b"x", b"dir/b.txt": b"y"}]
        )
        self.source = SourceStore(self.repo)

    def test_resolve_branch(self) -> None:
        name, commit = self.source.resolve_branch(["master", "main"])
        self.assertEqual("master", name)
        self.assertEqual(self.commits[-1].id, commit.id)

    def test_resolve_branch_fallback(self) -> None:
        repo, commits = memory_source([{b"a.txt": b"x"}], branch=b"main")
        name, commit = SourceStore(repo).resolve_branch(["master", "main"])
        self.assertEqual("main", name)
        self.assertEqual(commits[0].id, commit.id)

    def test_resolve_branch_preference(self) -> None:
        self.repo.refs[b"refs/heads/main"] = self.commits[0].id
        name, commit = self.source.resolve_branch(["main", "master"])
        self.assertEqual("main", name)
        self.assertEqual(self.commits[0].id, commit.id)

    def test_resolve_branch_missing(self) -> None:
        with self.assertRaises(BranchNotFound) as cm:
            self.source.resolve_branch(["trunk", "main"])
        self.assertEqual(("trunk", "main"), cm.exception.candidates)
        self.assertIn("trunk, main", str(cm.exception))

    def test_get_commit_missing(self) -> None:
        with self.assertRaises(ContentReadFailure) as cm:
            self.source.get_commit(b"1" * 40)
        self.assertEqual(b"1" * 40, cm.exception.object_id)

    def test_get_commit_wrong_type(self) -> None:
        with self.assertRaises(ContentReadFailure):
            self.source.get_commit(self.commits[0].tree)

    def test_parent(self) -> None:
        parent = self.source.parent(self.commits[1], 0)
        self.assertEqual(self.commits[0].id, parent.id)

    def test_no_such_parent(self) -> None:
        with self.assertRaises(NoSuchParent) as cm:
            self.source.parent(self.commits[0], 0)
        self.assertEqual(0, cm.exception.index)
        with self.assertRaises(NoSuchParent):
            self.source.parent(self.commits[1], 1)

    def test_tree_entries(self) -> None:
        entries = self.source.tree_entries(self.commits[1].tree)
        self.assertEqual([b"a.txt", b"dir"], [e.path for e in entries])
        self.assertTrue(stat.S_ISDIR(entries[1].mode))

    def test_read_blob(self) -> None:
        entry = self.source.tree_entries(self.commits[0].tree)[0]
        self.assertEqual(b"x", self.source.read_blob(entry.sha))

    def test_read_blob_missing(self) -> None:
        self.assertRaises(ContentReadFailure, self.source.read_blob, b"2" * 40)


class TargetStoreTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.tempdir = make_tempdir(self)
        self.path = os.path.join(self.tempdir, "target")
        self.target = TargetStore.init_repository(self.path)
        self.addCleanup(self.target.close)

    def test_init_creates_directory(self) -> None:
        self.assertTrue(os.path.isdir(os.path.join(self.path, ".git")))
        self.assertIsNone(self.target.head())

    def test_init_existing_empty_directory(self) -> None:
        path = os.path.join(self.tempdir, "empty")
        os.mkdir(path)
        target = TargetStore.init_repository(path)
        self.addCleanup(target.close)
        self.assertTrue(os.path.isdir(os.path.join(path, ".git")))

    def test_init_refuses_existing_repository(self) -> None:
        self.assertRaises(FileExistsError, TargetStore.init_repository, self.path)

    def test_init_branch(self) -> None:
        path = os.path.join(self.tempdir, "other")
        target = TargetStore.init_repository(path, branch="main")
        self.addCleanup(target.close)
        self.assertEqual(b"ref: refs/heads/main", target.repo.refs.read_ref(b"HEAD"))

    def test_write_file(self) -> None:
        self.target.write_file(b"dir/sub/a.txt", b"contents")
        self.assertEqual(b"contents", read_file(self.path, "dir/sub/a.txt"))

    def test_write_file_overwrites(self) -> None:
        self.target.write_file(b"a.txt", b"old contents")
        self.target.write_file(b"a.txt", b"new")
        self.assertEqual(b"new", read_file(self.path, "a.txt"))

    def test_write_file_executable(self) -> None:
        self.target.write_file(b"run.sh", b"#!/bin/sh\n", X)
        self.target.write_file(b"plain", b"", 0o100644)
        st = os.stat(os.path.join(self.path, "run.sh"))
        self.assertTrue(st.st_mode & stat.S_IXUSR)
        st = os.stat(os.path.join(self.path, "plain"))
        self.assertFalse(st.st_mode & stat.S_IXUSR)

    def test_write_file_invalid_path(self) -> None:
        self.assertRaises(ContentWriteFailure, self.target.write_file, b"../a", b"")
        self.assertRaises(
            ContentWriteFailure, self.target.write_file, b".git/config", b""
        )

    def test_create_directory_idempotent(self) -> None:
        self.target.create_directory(b"dir")
        self.target.create_directory(b"dir")
        self.assertTrue(os.path.isdir(os.path.join(self.path, "dir")))

    def test_create_directory_over_file(self) -> None:
        self.target.write_file(b"dir", b"not a directory")
        with self.assertRaises(ContentWriteFailure) as cm:
            self.target.create_directory(b"dir")
        self.assertEqual(b"dir", cm.exception.path)
        self.assertIsInstance(cm.exception.__cause__, OSError)

    def test_write_file_stores_blob(self) -> None:
        blob_id = self.target.write_file(b"a.txt", b"x\r\n")
        self.assertEqual(Blob.from_string(b"x\r\n").id, blob_id)
        self.assertEqual(b"x\r\n", self.target.repo[blob_id].data)

    def test_set_mode(self) -> None:
        self.target.write_file(b"run.sh", b"#!/bin/sh\n")
        self.target.set_mode(b"run.sh", X)
        st = os.stat(os.path.join(self.path, "run.sh"))
        self.assertTrue(st.st_mode & stat.S_IXUSR)
        self.target.set_mode(b"run.sh", F)
        st = os.stat(os.path.join(self.path, "run.sh"))
        self.assertFalse(st.st_mode & stat.S_IXUSR)

    def test_set_mode_missing_file(self) -> None:
        with self.assertRaises(ContentWriteFailure) as cm:
            self.target.set_mode(b"missing", X)
        self.assertEqual(b"missing", cm.exception.path)

    def test_stage_and_write_tree(self) -> None:
        a = self.target.write_file(b"a.txt", b"x")
        b = self.target.write_file(b"dir/b.txt", b"y", X)
        self.target.stage_entries(
            [TreeEntry(b"a.txt", F, a), TreeEntry(b"dir/b.txt", X, b)]
        )
        tree_id = self.target.write_tree_from_index()
        tree = self.target.repo[tree_id]
        self.assertEqual([b"a.txt", b"dir"], [e.path for e in tree.iteritems()])
        self.assertEqual((F, Blob.from_string(b"x").id), tree[b"a.txt"])
        subtree = self.target.repo[tree[b"dir"][1]]
        self.assertEqual((X, Blob.from_string(b"y").id), subtree[b"b.txt"])

    def test_stage_ignores_checkin_filters(self) -> None:
        attrs = self.target.write_file(b".gitattributes", b"* text eol=lf\n")
        data = self.target.write_file(b"a.txt", b"x\r\n")
        config = self.target.repo.get_config()
        config.set((b"core",), b"autocrlf", b"true")
        config.write_to_path()
        self.target.stage_entries(
            [TreeEntry(b".gitattributes", F, attrs), TreeEntry(b"a.txt", F, data)]
        )
        tree = self.target.repo[self.target.write_tree_from_index()]
        self.assertEqual(Blob.from_string(b"x\r\n").id, tree[b"a.txt"][1])

    def test_stage_nothing(self) -> None:
        self.target.stage_entries([])
        self.assertEqual([], list(self.target.repo.open_index()))

    def test_write_tree_from_empty_index(self) -> None:
        tree_id = self.target.write_tree_from_index()
        self.assertEqual([], list(self.target.repo[tree_id].iteritems()))

    def _create_commit(self, parents, message=b"message\n"):
        tree_id = self.target.write_tree_from_index()
        return self.target.create_commit(
            tree_id,
            parents,
            author=AUTHOR,
            committer=COMMITTER,
            message=message,
            author_time=1000,
            author_timezone=3600,
            commit_time=2000,
            commit_timezone=0,
        )

    def test_create_commit(self) -> None:
        first = self._create_commit([])
        self.assertEqual(first, self.target.head())
        second = self._create_commit([first])
        self.assertEqual(second, self.target.head())
        commit = self.target.repo[second]
        self.assertEqual([first], commit.parents)
        self.assertEqual(AUTHOR, commit.author)
        self.assertEqual(COMMITTER, commit.committer)
        self.assertEqual(1000, commit.author_time)
        self.assertEqual(3600, commit.author_timezone)
        self.assertEqual(b"message\n", commit.message)

    def test_create_commit_updates_branch(self) -> None:
        first = self._create_commit([])
        self.assertEqual(first, self.target.repo.refs[b"refs/heads/master"])

    def test_create_root_commit_with_existing_head(self) -> None:
        self._create_commit([])
        self.assertRaises(ContentWriteFailure, self._create_commit, [])

    def test_create_commit_stale_parent(self) -> None:
        first = self._create_commit([])
        self._create_commit([first])
        self.assertRaises(ContentWriteFailure, self._create_commit, [first])

    def test_reopen(self) -> None:
        first = self._create_commit([])
        repo = Repo(self.path)
        self.addCleanup(repo.close)
        self.assertEqual(first, repo.head())
