# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .backends import PostgresBackend, SqliteBackend, StorageBackend, UnknownBackendError, get_backend
from .session import configure_session, init_database, session_factory

__all__ = [
    "session_factory",
    "configure_session",
    "init_database",
    "StorageBackend",
    "SqliteBackend",
    "PostgresBackend",
    "UnknownBackendError",
    "get_backend",
]
