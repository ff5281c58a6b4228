# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import argparse
import logging
from typing import Optional, Sequence

from basketsvc.backend.db import configure_session, init_database
from basketsvc.settings import get_settings

logger = logging.getLogger(__name__)


def init(reset: bool) -> None:
    engine = configure_session(get_settings())
    try:
        init_database(engine, reset=reset)
    finally:
        engine.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="basketsvc-init-db", description="Create the basket database schema."
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="drop the existing tables and seed the development basket",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    logger.info("Creating the basket database")
    init(args.reset)
    logger.info("Basket database created")


if __name__ == "__main__":
    main()
