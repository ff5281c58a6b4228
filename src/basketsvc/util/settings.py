r"""Basic tools to handle application settings.

It provides:
    A Settings base class to manage persistent application settings as basic
        key/value pairs, overridable by environment variables.
    A SettingsError exception to handle settings persistency errors.
    A Setting data descriptor to access the basic key/value pairs as class
        attributes (appSettings.keys['mySetting'] = value is replaced by
        appSettings.mySetting = value)
    A get_app_dirs convenient function to retrieve the standard user
        directories of the application ('%LOCALAPPDATA%\<appName>' on Windows,
        '$XDG_DATA_HOME/<appName>' or '~/.local/share/<appName>' elsewhere).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional, cast, overload

__all__ = [
    "Settings",
    "SettingsError",
    "Setting",
    "AppDirs",
    "get_app_dirs",
    "to_bool",
    "to_list",
]

logger = logging.getLogger(__name__)


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def to_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return list(value)


class PathEncoder(json.JSONEncoder):
    """A JSONEncoder to encode a pathlib.Path objects in a JSON file.

    The Path object is encoded into a string using its as_posix() method or into
    an empty string if the path name is not defined.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Path):
            return obj.as_posix() if obj.name else ""
        # Let the base class default method raise the TypeError
        return json.JSONEncoder.default(self, obj)


class SettingsError(Exception):
    """Exception raised on settings saving error."""

    pass


class Settings(object):
    """A base class to handle persistent application settings.

    Settings key/value pairs are read from / save to a JSON file passed when
    creating the Settings instance. Environment variables named
    '<ENV_PREFIX><KEY>' (key in upper case) take precedence over the file
    content and are never saved back.

    Examples:
        appSettings = Settings('path/to/mySettingsFile.json')
        appSettings.set_value('mySetting', (100, 200))
        appSettings.value('mySetting', default_value=(0, 0))   # returns 100, 200
        appSettings.contains('mySetting')   # returns True
        appSettings.all_keys()   # returns ['mySetting']
        appSettings.remove('mySetting')
        appSettings.clear()

    Attributes:
        _settings_file: the path to the persistent settings file.
        _keys: the settings key/value pairs container.
        _overrides: the key/value pairs read from the environment.
    """

    ENV_PREFIX = ""

    _keys: dict[str, Any]
    _overrides: dict[str, str]
    _settings_file: Path

    def __init__(self, settings_file: Path) -> None:
        self._settings_file = settings_file.with_suffix(".json")

        self._keys = self._load()
        self._overrides = self._load_environ()

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _load(self) -> dict[str, Any]:
        """Intialize the settings from its persistent JSON file.

        Returns:
            The key/value pairs read from the JSON file or an empty dict on
            loading errors.
        """
        try:
            with self._settings_file.open() as fh:
                keys = cast(dict[str, Any], json.load(fh))
            return keys
        except (FileNotFoundError, json.JSONDecodeError) as exc:
            logger.debug(f"Cannot load the settings file: {exc}")
            return dict()

    def _load_environ(self) -> dict[str, str]:
        if not self.ENV_PREFIX:
            return dict()
        prefix = self.ENV_PREFIX
        return {
            name[len(prefix):].lower(): value
            for name, value in os.environ.items()
            if name.startswith(prefix)
        }

    def save(self) -> None:
        """Save the settings key/value pairs on a JSON file.

        Use a dedicated JSONEncoder to handle pathlib.Path objects.

        Raises:
            A SettingsErrors exception on OS or JSON encoding errors.
        """
        try:
            self._settings_file.parent.mkdir(parents=True, exist_ok=True)
            with self._settings_file.open(mode="w") as fh:
                json.dump(self._keys, fh, indent=4, cls=PathEncoder)
        except (OSError, TypeError) as e:
            raise SettingsError(e)

    def value(self, key: str, default_value: Any = None) -> Any:
        """Returns the value for setting key.

        The environment override wins, then the settings file. If the setting
        doesn't exist, returns default_value.

        Args:
            key: The setting key to look for.
            default_value: The default value to be returned if key does not exist.

        Returns:
            The key value.
        """
        if key in self._overrides:
            return self._overrides[key]
        return self._keys.get(key, default_value)

    def set_value(self, key: str, value: Any) -> None:
        """Sets the value of setting key to value.

        If the key already exists, the previous value is overwritten.

        Args:
            key: The setting key to set.
            value: The value to set.
        """
        self._overrides.pop(key, None)
        self._keys[key] = value

    def contains(self, key: str) -> bool:
        return key in self._overrides or key in self._keys

    def remove(self, key: str) -> None:
        """Removes the setting key.

        No errors are raised if there is no setting called key.
        """
        self._overrides.pop(key, None)
        if key in self._keys:
            del self._keys[key]

    def all_keys(self) -> list[str]:
        return list(dict.fromkeys([*self._keys, *self._overrides]))

    def clear(self) -> None:
        """Removes all entries associated to this Settings object."""
        self._keys = dict()
        self._overrides = dict()


class Setting(object):
    """A data descriptor to simplify a key/value access in a Settings instance.

    The name of a Setting descriptor corresponds to a key in the Settings
    instance container / persistent file.
    On creation, an optional default value can be set for the associated key,
    and an optional converter applied to values read as strings (e.g. from
    the environment).

    Examples:
        Class AppSettings(Settings):
            mySetting = Setting(default_value=8000, converter=int)

        appSettings = AppSettings('path/to/mySettingsFile.json')
        appSettings.mySetting   # returns 8000
        appSettings.mySetting = 9000
        appSettings.mySetting   # returns 9000
    """

    _key: str
    default_value: Optional[Any]
    converter: Optional[Callable[[Any], Any]]

    def __init__(
        self,
        default_value: Any = None,
        converter: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self.default_value = default_value
        self.converter = converter

    def __set_name__(self, owner: type[Settings], name: str) -> None:
        self._key = name

    @overload
    def __get__(self, instance: None, owner: None) -> Any:
        ...

    @overload
    def __get__(self, instance: Settings, owner: type[Settings]) -> Any:
        ...

    def __get__(
        self, instance: Optional[Settings], owner: Optional[type[Settings]]
    ) -> Any:
        if instance is None:
            return self
        value = instance.value(self._key, self.default_value)
        if value is not None and self.converter is not None:
            return self.converter(value)
        return value

    def __set__(self, instance: Settings, value: Any) -> None:
        instance.set_value(self._key, value)


class AppDirs(NamedTuple):
    """Paths of the default user directories for the application."""

    user_data_dir: Path
    user_config_dir: Path
    user_log_dir: Path


def get_app_dirs(app_name: str) -> AppDirs:
    """Returns the default user directories for the application.

    The directories are created if required.

    Args:
        app_name: the application name.

    Returns:
        An AppDirs NamedTuple containing the user app directories paths.
    """
    folder: str | Path | None
    folder = os.environ.get("LOCALAPPDATA") or os.environ.get("XDG_DATA_HOME")

    if folder is None:
        folder = Path.home() / ".local" / "share"
    folder = Path(folder)

    user_data_dir = folder / app_name
    user_data_dir.mkdir(parents=True, exist_ok=True)

    user_config_dir = user_data_dir / "Config"
    user_config_dir.mkdir(parents=True, exist_ok=True)

    user_log_dir = user_data_dir / "Logs"
    user_log_dir.mkdir(parents=True, exist_ok=True)

    return AppDirs(user_data_dir, user_config_dir, user_log_dir)
