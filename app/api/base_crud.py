from typing import Any, Generic, List, Optional, Type, TypeVar

import psycopg2
from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.declarative import DeclarativeMeta
from sqlalchemy.orm import Query, Session

from app.core.logger import logger
from app.core.security import SYSTEM_TOKEN, TokenData

ModelType = TypeVar('ModelType', bound=DeclarativeMeta)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)
FilterSchemaType = TypeVar('FilterSchemaType', bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, FilterSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    def _check_permission(self, db_obj: ModelType, user: TokenData) -> bool:
        """Override to scope records to the calling admin"""
        return user == SYSTEM_TOKEN

    def _apply_filters(
        self, query: Query, filters: Optional[FilterSchemaType] = None
    ) -> Query:
        """Equality per set field; a list field named `<column>_in` is a membership test"""
        if not filters:
            return query

        for field, value in filters.model_dump(exclude_none=True).items():
            if field.endswith('_in') and isinstance(value, list):
                column = getattr(self.model, field[:-3], None)
                if column is not None:
                    query = query.filter(column.in_(value))
                continue
            column = getattr(self.model, field, None)
            if column is not None:
                query = query.filter(column == value)
        return query

    def _conflict_detail(self, e: IntegrityError) -> str:
        if isinstance(e.orig, psycopg2.errors.UniqueViolation):
            # e.g. "Key (email)=(a@b.c) already exists."
            message = e.orig.diag.message_detail or ''
            if message.startswith('Key ('):
                column = message[len('Key (') :].split(')')[0]
                return f'A {self.name} with this {column} already exists'
        return f'{self.name} already exists'

    def create(
        self,
        db: Session,
        obj: CreateSchemaType,
        user: Optional[TokenData] = None,
        commit: bool = True,
    ) -> ModelType:
        """Insert a record. With commit=False it is only flushed and the caller commits."""
        columns = self.model.__table__.columns.keys()
        values = {k: v for k, v in obj.model_dump().items() if k in columns}
        db_obj = self.model(**values)
        try:
            db.add(db_obj)
            if not commit:
                db.flush()
                return db_obj
            db.commit()
        except IntegrityError as e:
            db.rollback()
            detail = self._conflict_detail(e)
            logger.error('Conflict creating %s: %s', self.name, str(e.orig))
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error('Database error creating %s: %s', self.name, str(e))
            raise
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: Any, user: TokenData) -> ModelType:
        obj = db.query(self.model).filter(self.model.id == id).first()
        if not obj:
            logger.error('%s %s not found', self.name, id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f'{self.name} not found'
            )
        if not self._check_permission(obj, user):
            logger.error('Admin %s denied access to %s %s', user.admin_id, self.name, id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f'Not authorized to access this {self.name}',
            )
        return obj

    def find(
        self,
        db: Session,
        filters: Optional[FilterSchemaType] = None,
        user: Optional[TokenData] = None,
        sort_by: str = 'created_at',
        sort_order: str = 'desc',
    ) -> List[ModelType]:
        """Every matching record, sorted. Lists are small and never paginated."""
        column = getattr(self.model, sort_by, None)
        if column is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Invalid sort field: {sort_by}',
            )
        query = self._apply_filters(db.query(self.model), filters)
        return query.order_by(column.desc() if sort_order == 'desc' else column).all()

    def delete(self, db: Session, id: Any, user: TokenData) -> ModelType:
        obj = self.get(db, id, user)
        try:
            db.delete(obj)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error('Error deleting %s %s: %s', self.name, id, str(e))
            raise
        return obj
