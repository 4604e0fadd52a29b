# cli.py -- Command-line interface for gitreplay
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

"""Command-line interface to gitreplay.

Usage::

    gitreplay SOURCE TARGET NAME EMAIL

Replays the history of the ``master`` (or ``main``) branch of SOURCE into a
new repository at TARGET, committing as ``NAME <EMAIL>``.
"""

__all__ = ["main"]

import argparse
import signal
import sys
import threading
import types
from collections.abc import Sequence

from dulwich.errors import NotGitRepository

from .config import resolve_committer
from .errors import ReplicationError, ReplicationFailed
from .log_utils import default_logging_config, getLogger
from .replay import replicate

logger = getLogger(__name__)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gitreplay",
        description="Replay the history of a git repository into a new repository.",
    )
    parser.add_argument("source", help="Repository to read history from")
    parser.add_argument("target", help="Path for the new repository")
    parser.add_argument("name", help="Committer name for the replayed commits")
    parser.add_argument("email", help="Committer email for the replayed commits")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the gitreplay CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    args = _parse_args(argv)
    default_logging_config()

    try:
        committer = resolve_committer(name=args.name, email=args.email)
    except ReplicationError as e:
        logger.error("error: %s", e)
        return 1

    cancel_event = threading.Event()

    def request_cancel(signum: int, frame: types.FrameType | None) -> None:
        logger.warning("interrupted; stopping after the current commit")
        cancel_event.set()

    previous_handler = signal.signal(signal.SIGINT, request_cancel)
    try:
        result = replicate(
            args.source, args.target, committer=committer, cancel_event=cancel_event
        )
    except NotGitRepository:
        logger.error("error: %s is not a git repository", args.source)
        return 1
    except ReplicationFailed as e:
        logger.error("error: %s", e.__cause__)
        if e.last_index >= 0:
            logger.error(
                "last replicated source commit: %d (%s)",
                e.last_index,
                e.result.commits[-1][0].decode("ascii"),
            )
        else:
            logger.error("no commits were replicated")
        return 1
    except (ReplicationError, OSError) as e:
        logger.error("error: %s", e)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    logger.info("%s is now at %s", args.target, result.head.decode("ascii"))
    return 0


def _main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    _main()
