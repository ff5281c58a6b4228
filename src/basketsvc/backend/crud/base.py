# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from typing import Any, Generic, Type, TypeVar, Union, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from basketsvc.backend import schemas
from basketsvc.backend.models import ModelType

CreateSchemaType = TypeVar("CreateSchemaType", bound=schemas.BaseSchema)  # type: ignore[type-arg]
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=schemas.BaseSchema)  # type: ignore[type-arg]


class CrudError(Exception):
    pass


class CrudIntegrityError(CrudError):
    pass


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """CRUD object with default methods to Create, Read, Update, Delete (CRUD)."""
        self.model = model

    def get_all(self, dbsession: Session) -> list[ModelType]:
        try:
            obj_list = cast(
                list[ModelType], dbsession.scalars(select(self.model)).all()
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return obj_list

    def create(self, dbsession: Session, *, obj_in: CreateSchemaType) -> ModelType:
        obj_in_data = obj_in.flatten()
        db_obj = self.model(**obj_in_data)
        dbsession.add(db_obj)
        try:
            dbsession.commit()
        except IntegrityError as exc:
            dbsession.rollback()
            raise CrudIntegrityError() from exc
        except SQLAlchemyError as exc:
            dbsession.rollback()
            raise CrudError() from exc
        else:
            dbsession.refresh(db_obj)
            return db_obj

    def update(
        self,
        dbsession: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, dict[str, Any]],
    ) -> ModelType:
        updated = False

        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.flatten()

        for field, value in update_data.items():
            if value is not None and getattr(db_obj, field) != value:
                setattr(db_obj, field, value)
                updated = True

        if updated:
            try:
                dbsession.commit()
            except SQLAlchemyError as exc:
                dbsession.rollback()
                raise CrudError() from exc
            else:
                dbsession.refresh(db_obj)
                return db_obj
        return db_obj

    def delete(self, dbsession: Session, *, db_obj: ModelType) -> None:
        dbsession.delete(db_obj)
        try:
            dbsession.commit()
        except IntegrityError as exc:
            dbsession.rollback()
            raise CrudIntegrityError() from exc
        except SQLAlchemyError as exc:
            dbsession.rollback()
            raise CrudError() from exc
