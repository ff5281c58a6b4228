# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import enum
import functools
from contextvars import ContextVar
from typing import Any, Callable, NamedTuple, Optional, ParamSpec, TypeVar

from sqlalchemy.orm import Session

from basketsvc.backend.db import session_factory

P = ParamSpec("P")
T = TypeVar("T")

_current_session: ContextVar[Session] = ContextVar("current_session")


class CommandStatus(enum.Enum):
    """Authorized status of a command in its command response.

    REJECTED: the command arguments break a basket rule.
    NOT_FOUND: the command targets basket items that do not exist.
    COMPLETED : The command has terminated with success.
    FAILED: The command has terminated with storage errors.
    """

    REJECTED = enum.auto()
    NOT_FOUND = enum.auto()
    COMPLETED = enum.auto()
    FAILED = enum.auto()


class CommandResponse(NamedTuple):
    """To be returned by any model's commands.

    Class attributes:
        status: the command status as defined above.
        reason: a message to explicit the status.
        body: an object returned by the command.
    """

    status: CommandStatus
    reason: Optional[str] = None
    body: Any = None

    def __repr__(self) -> str:
        reason = f", {self.reason}" if self.reason else ""
        return f"CommandResponse({self.status.name}{reason})"


def current_session() -> Session:
    """Returns the session of the running command."""
    return _current_session.get()


# https://mypy.readthedocs.io/en/stable/generics.html#declaring-decorators
def command(func: Callable[P, T]) -> Callable[P, T]:
    """Run the decorated command in its own database session.

    The session is bound to the current context, so that commands running
    concurrently in different request threads never share a session.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        with session_factory() as session:
            token = _current_session.set(session)
            try:
                return func(*args, **kwargs)
            finally:
                _current_session.reset(token)

    return wrapper
