# Copyright (c) 2023 Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Basket Service is a microservice managing per-user shopping baskets.

Requires Python >= 3.10

Usage:
    ''python -m basketsvc''
"""

__all__ = ["DEV_MODE", "TEST_MODE", "run_main"]

import logging
import os
import sys
from typing import Final

logger = logging.getLogger(__name__)

DEV_MODE: Final[bool] = os.environ.get("BASKETSVC_DEV", "0") != "0"
TEST_MODE: Final[bool] = os.environ.get("BASKETSVC_TEST", "0") != "0"


def except_hook(exc_type, exc_value, _exc_traceback):  # type: ignore[no-untyped-def]
    from basketsvc import __about__  # pylint: disable=import-outside-toplevel

    error_msg = f"{exc_type.__name__}: {exc_value}"
    logger.fatal("%s", error_msg, exc_info=False)
    sys.stderr.write(f"\nbasketsvc - {str(error_msg)}\n\n")
    logger.info("%(app_name)s is closing...", {"app_name": __about__.__title__})
    sys.exit(1)


def run_main() -> None:
    """Program entry point."""
    # pylint: disable=import-outside-toplevel
    import uvicorn

    from basketsvc import __about__
    from basketsvc.settings import get_settings
    from basketsvc.util.logutil import LogConfig
    from basketsvc.web import create_app

    # Handles exceptions not trapped earlier.
    sys.excepthook = except_hook

    settings = get_settings()

    log_config = LogConfig(settings.log_file, settings.log_level, log_on_console=True)
    log_config.init_logging()

    app_name = __about__.__title__
    logger.info("%(app_name)s is starting...", {"app_name": app_name})
    if settings.dev_mode:
        logger.info("Running in Development mode")
    else:
        logger.info("Running in Production mode")

    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_config=None,
        )
    finally:
        logger.info("%(app_name)s is closing...", {"app_name": app_name})
        log_config.stop_logging()


if __name__ == "__main__":
    run_main()
