# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from basketsvc import __about__
from basketsvc.backend.db import configure_session, init_database
from basketsvc.settings import BasketSettings, get_settings

from .auth import JwtTokenVerifier, TokenVerifier
from .routes import router

logger = logging.getLogger(__name__)


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed path parameters are client errors, as any other bad argument.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(
    settings: Optional[BasketSettings] = None,
    token_verifier: Optional[TokenVerifier] = None,
) -> FastAPI:
    """Build the basket service application.

    Args:
        settings: the service settings, the user ones if None.
        token_verifier: the bearer token verifier, a JwtTokenVerifier built
            from the settings if None.
    """
    settings = settings or get_settings()
    verifier = token_verifier or JwtTokenVerifier.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        engine = configure_session(settings)
        init_database(engine, reset=settings.dev_mode)
        logger.info("Basket database ready")
        yield
        engine.dispose()

    app = FastAPI(
        title="Basket Service API",
        version=__about__.__version__,
        description=__about__.__summary__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_verifier = verifier
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.include_router(router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app
