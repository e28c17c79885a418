import abc
import logging
from typing import Generic, TypeVar, Optional

from sqlalchemy import Executable, Select, func, select
from sqlalchemy.exc import SQLAlchemyError

from src.shared.database.base_mapper import BaseEntityMapper
from src.shared.database.database import Database
from src.shared.exceptions import StorageFailure

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity")
TModel = TypeVar("TModel")


class BaseRepository(abc.ABC, Generic[TEntity, TModel]):
    def __init__(self, db: Database, mapper: BaseEntityMapper[TModel, TEntity]):
        self.db = db
        self.mapper = mapper

    async def find_one(self, statement: Executable) -> Optional[TModel]:
        try:
            async with self.db.session_maker() as session:
                result = await session.execute(statement)
                entity = result.scalar_one_or_none()
                if entity is None:
                    return None
                return self.mapper.to_model(entity)
        except SQLAlchemyError as e:
            logger.error(f"Query for a single {self._entity_label()} failed: {e}")
            raise StorageFailure(f"load {self._entity_label()}") from e

    async def find_all(self, statement: Executable) -> list[TModel]:
        try:
            async with self.db.session_maker() as session:
                result = await session.execute(statement)
                entities = list(result.scalars().all())
                return [self.mapper.to_model(entity) for entity in entities]
        except SQLAlchemyError as e:
            logger.error(f"Query for {self._entity_label()} list failed: {e}")
            raise StorageFailure(f"list {self._entity_label()}") from e

    async def count(self, statement: Select) -> int:
        """
        Count the rows a select statement would return.

        Ordering and paging on the statement are dropped before counting.

        Args:
            statement: SQLAlchemy select statement to count

        Returns:
            Number of matching rows
        """
        count_stmt = select(func.count()).select_from(
            statement.order_by(None).limit(None).offset(None).subquery()
        )
        try:
            async with self.db.session_maker() as session:
                result = await session.execute(count_stmt)
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Count of {self._entity_label()} failed: {e}")
            raise StorageFailure(f"count {self._entity_label()}") from e

    def _entity_label(self) -> str:
        return type(self).__name__.removesuffix("Repository")
