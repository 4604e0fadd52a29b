# log_utils.py -- Logging utilities for gitreplay
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

"""Logging utilities for gitreplay.

gitreplay is mostly used as a library, so the ``gitreplay`` logger carries a
no-op handler until an application opts in to output by calling
:func:`default_logging_config`. Modules only need :func:`getLogger`.

gitreplay keeps its own package logger rather than logging through
dulwich's. Replication messages (branches walked, commits replayed, blobs
written or skipped) can then be filtered or raised to DEBUG on their own,
apart from the object store's messages under ``dulwich``. Both propagate to
the root logger that :func:`default_logging_config` sets up.

Trace output follows git's ``GIT_TRACE`` convention:

- ``1``, ``2`` or ``true``: debug output to stderr
- an integer from 3 to 9: debug output to that file descriptor
- an absolute path: debug output appended to that file, or to
  ``trace.<pid>`` inside it when the path is a directory
"""

__all__ = [
    "default_logging_config",
    "getLogger",
    "remove_null_handler",
]

import logging
import os
import sys

getLogger = logging.getLogger

TRACE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


class _NullHandler(logging.Handler):
    """No-op logging handler to avoid unexpected logging warnings."""

    def emit(self, record: logging.LogRecord) -> None:
        pass


_NULL_HANDLER = _NullHandler()
_GITREPLAY_LOGGER = getLogger("gitreplay")
_GITREPLAY_LOGGER.addHandler(_NULL_HANDLER)


def _get_trace_target(environ=None) -> str | int | None:
    """Determine where trace output should go.

    Returns:
        None if tracing is disabled, 2 for stderr, a file descriptor
        between 3 and 9, or an absolute path.
    """
    if environ is None:
        environ = os.environ
    value = environ.get("GIT_TRACE", "")
    if not value or value.lower() in ("0", "false"):
        return None
    if value.lower() in ("1", "2", "true"):
        return 2
    if value.isdigit():
        fd = int(value)
        return fd if 3 <= fd <= 9 else None
    if os.path.isabs(value):
        return value
    return None


def _configure_logging_from_trace(environ=None) -> bool:
    """Configure debug logging from ``GIT_TRACE``.

    Returns: True if trace logging was configured
    """
    target = _get_trace_target(environ)
    if target is None:
        return False

    if target == 2:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format=TRACE_FORMAT)
        return True

    try:
        if isinstance(target, int):
            stream = os.fdopen(target, "w", buffering=1)
            logging.basicConfig(level=logging.DEBUG, stream=stream, format=TRACE_FORMAT)
        else:
            if os.path.isdir(target):
                target = os.path.join(target, f"trace.{os.getpid()}")
            logging.basicConfig(
                level=logging.DEBUG, filename=target, filemode="a", format=TRACE_FORMAT
            )
    except OSError as e:
        sys.stderr.write(f"Warning: unable to open GIT_TRACE target {target}: {e}\n")
        return False
    return True


def default_logging_config(level: int = logging.INFO) -> None:
    """Set up logging for command-line use.

    ``GIT_TRACE`` takes precedence; otherwise messages of at least ``level``
    are written to stderr.
    """
    remove_null_handler()
    if not _configure_logging_from_trace():
        logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")


def remove_null_handler() -> None:
    """Remove the no-op handler from the gitreplay logger."""
    _GITREPLAY_LOGGER.removeHandler(_NULL_HANDLER)
