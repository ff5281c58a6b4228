# Copyright (c) 2023 Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""The BasketSettings model.

The BasketSettings model defines the basket service settings and makes them
accessible throughout the application through the get_settings() accessor.
"""

import functools
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from basketsvc import DEV_MODE, TEST_MODE
from basketsvc.util.settings import Setting, Settings, get_app_dirs, to_bool, to_list

if TYPE_CHECKING:
    from basketsvc.util.settings import AppDirs

__all__ = ["BasketSettings", "get_settings"]

logger = logging.getLogger(__name__)


class BasketSettings(Settings):
    """The BasketSettings model definition.

    Every setting may be overridden by a BASKETSVC_<NAME> environment variable
    (e.g. BASKETSVC_DB_BACKEND=postgresql).

    Class attributes:
        log_level: The global log level.
        dev_mode: Reset and seed the database on startup.
        db_backend: The storage backend name: 'sqlite' or 'postgresql'.
        db_path: Path to the SQLite database file, or ':memory:'.
        db_host, db_port, db_name, db_user, db_password: PostgreSQL connection.
        auth_issuer: Issuer (authority) of the bearer tokens.
        auth_audience: Expected audience of the bearer tokens.
        auth_algorithms: Accepted signing algorithms, HS256 with a shared secret
            and RS256 otherwise when empty.
        auth_secret: Shared secret for HS* tokens. When empty, keys are fetched
            from the JWKS endpoint.
        auth_jwks_url: The JWKS endpoint, defaults to the issuer well-known one.
        auth_identity_claim: The token claim holding the caller identity.
        host, port: Address the HTTP server listens on.

    Attributes:
        app_dirs: An AppDirs NamedTuple containing the user app directories paths.
    """

    ENV_PREFIX = "BASKETSVC_"

    app_dirs: Optional["AppDirs"]

    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_DB_PATH = "basket.db"

    log_level: Setting = Setting(default_value=DEFAULT_LOG_LEVEL)
    dev_mode: Setting = Setting(default_value=DEV_MODE, converter=to_bool)
    db_backend: Setting = Setting(default_value="sqlite")
    db_path: Setting = Setting(default_value=DEFAULT_DB_PATH)
    db_host: Setting = Setting(default_value="localhost")
    db_port: Setting = Setting(default_value=5432, converter=int)
    db_name: Setting = Setting(default_value="basket")
    db_user: Setting = Setting(default_value="basket")
    db_password: Setting = Setting(default_value="")
    auth_issuer: Setting = Setting(default_value="")
    auth_audience: Setting = Setting(default_value="")
    auth_algorithms: Setting = Setting(default_value=[], converter=to_list)
    auth_secret: Setting = Setting(default_value="")
    auth_jwks_url: Setting = Setting(default_value="")
    auth_identity_claim: Setting = Setting(default_value="sub")
    host: Setting = Setting(default_value="127.0.0.1")
    port: Setting = Setting(default_value=8000, converter=int)

    def __init__(self, settings_file: Path, app_dirs: Optional["AppDirs"] = None) -> None:
        super().__init__(settings_file)
        self.app_dirs = app_dirs

    def __repr__(self) -> str:
        return (
            f"BasketSettings({self.log_level}, {self.db_backend}, "
            f"dev_mode={self.dev_mode})"
        )

    @property
    def log_file(self) -> Path:
        log_dir = self.app_dirs.user_log_dir if self.app_dirs else Path(".")
        return log_dir / "basketsvc.log"

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default value."""
        for setting in self.all_keys():
            descriptor = getattr(BasketSettings, setting, None)
            if isinstance(descriptor, Setting):
                setattr(self, setting, descriptor.default_value)


@functools.lru_cache(maxsize=None)
def get_settings() -> BasketSettings:
    """Returns the application settings, loaded once.

    The settings file is taken from the BASKETSVC_SETTINGS environment
    variable, or from the user configuration directory.
    """
    if TEST_MODE:
        app_name = "basketsvc_test"
    elif DEV_MODE:
        app_name = "basketsvc_dev"
    else:
        app_name = "basketsvc"

    settings_path = os.environ.get("BASKETSVC_SETTINGS")
    if settings_path:
        return BasketSettings(Path(settings_path))

    app_dirs = get_app_dirs(app_name)
    settings = BasketSettings(app_dirs.user_config_dir / "settings", app_dirs)
    logger.debug("Settings loaded from %s", settings.settings_file)
    return settings
