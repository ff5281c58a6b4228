"""Basic design patterns."""

from typing import Any

__all__ = ["Singleton"]


class Singleton(type):
    """A metaclass that creates a single instance per class.

    The first call to the class creates the instance, next calls return it
    whatever their arguments.
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]
