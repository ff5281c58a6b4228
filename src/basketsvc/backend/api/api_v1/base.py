# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from dataclasses import dataclass
from typing import Generic, Type, TypeVar

from sqlalchemy.orm import Session

from basketsvc.backend import crud, schemas
from basketsvc.backend.api.command import (
    CommandResponse,
    CommandStatus,
    command,
    current_session,
)

CRUDObjectType = TypeVar(  # pylint: disable=invalid-name
    "CRUDObjectType", bound=crud.CRUDBase  # type: ignore[type-arg]
)
SchemaType = TypeVar(  # pylint: disable=invalid-name
    "SchemaType", bound=schemas.BaseSchema  # type: ignore[type-arg]
)

logger = logging.getLogger(__name__)


@dataclass()
class CommandModel(Generic[CRUDObjectType, SchemaType]):
    crud_object: CRUDObjectType
    schema: Type[SchemaType]

    @property
    def session(self) -> Session:
        return current_session()

    def failed(self, message: str, exc: crud.CrudError) -> CommandResponse:
        reason = f"{message}: {exc.__cause__ or exc}"
        logger.error(reason)
        return CommandResponse(CommandStatus.FAILED, reason)

    @command
    def get_all(self) -> CommandResponse:
        try:
            db_objs = self.crud_object.get_all(self.session)
        except crud.CrudError as exc:
            return self.failed("GET-ALL - SQL or database error", exc)
        if not db_objs:
            return CommandResponse(CommandStatus.NOT_FOUND, "GET-ALL - No baskets found.")
        body = [self.schema.from_orm(db_obj) for db_obj in db_objs]
        return CommandResponse(CommandStatus.COMPLETED, body=body)
