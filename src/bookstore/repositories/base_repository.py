"""
Base repository class providing common database operations.

Model-specific repositories inherit from `BaseRepository` to reuse the generic
single-row operations below and add their own queries as needed.

Every public method runs inside its own transaction (`db_transaction`): begin,
execute, commit on success, rollback on any error. Errors leave this layer as
app-level exceptions from `bookstore.exceptions` only.
"""
import time
import logging
from typing import Any, Generic, Mapping, Type, TypeVar

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.database.base import Base
from bookstore.exceptions.base import NotFoundError
from bookstore.exceptions.mapper import db_transaction

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations keyed by integer `id`.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (e.g. `Book`, not `Book()`)
            db: The async database session, one per request
        """
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, values: Mapping[str, Any]) -> ModelType:
        """
        Insert one row and return the entity with its server-assigned id.

        Raises:
            DuplicateError: a unique constraint rejected the row
            RepositoryError: any other database failure
        """
        logger.debug(
            "repo.create.start",
            extra={"model": self.model_name, "operation": "create", "provided_keys": sorted(values)},
        )
        start = time.perf_counter()

        async with db_transaction(self.db, self.model_name):
            entity = self.model(**values)
            self.db.add(entity)
            # flush sends the INSERT so the id is populated before commit
            await self.db.flush()

        logger.info(
            "repo.create.success",
            extra={"model": self.model_name, "operation": "create", "id": entity.id, "duration_ms": _elapsed_ms(start)},
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, entity_id: int) -> ModelType:
        """
        Get an entity by its ID.

        Raises:
            NotFoundError: no row has this id
            RepositoryError: the query failed
        """
        async with db_transaction(self.db, self.model_name):
            result = await self.db.execute(
                select(self.model)
                .where(self.model.id == entity_id)
                .execution_options(populate_existing=True)
            )
            entity = result.scalar_one_or_none()
            if entity is None:
                logger.info("repo.get.not_found", extra={"model": self.model_name, "id": entity_id})
                raise NotFoundError(f"{self.model_name} with ID {entity_id} not found", fields=["id"])

        logger.debug("repo.get.success", extra={"model": self.model_name, "id": entity_id})
        return entity

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def update(self, entity_id: int, values: Mapping[str, Any]) -> ModelType:
        """
        Overwrite the given columns of one row and return the fresh entity.

        Unlike a partial PATCH, every provided value is written, including falsy
        ones such as `0` or `""`.

        Raises:
            NotFoundError: no row has this id
            DuplicateError: the new values collide with a unique constraint
            RepositoryError: any other database failure
        """
        start = time.perf_counter()

        async with db_transaction(self.db, self.model_name):
            result = await self.db.execute(
                update(self.model)
                .where(self.model.id == entity_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                logger.info("repo.update.not_found", extra={"model": self.model_name, "id": entity_id})
                raise NotFoundError(f"{self.model_name} with ID {entity_id} not found for update", fields=["id"])

            refreshed = await self.db.execute(
                select(self.model)
                .where(self.model.id == entity_id)
                .execution_options(populate_existing=True)
            )
            entity = refreshed.scalar_one()

        logger.info(
            "repo.update.success",
            extra={"model": self.model_name, "operation": "update", "id": entity_id, "duration_ms": _elapsed_ms(start)},
        )
        return entity

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: int) -> None:
        """
        Delete an entity by its ID.

        Deletion is not idempotent here: removing a missing row is a NotFoundError.
        """
        async with db_transaction(self.db, self.model_name):
            result = await self.db.execute(
                delete(self.model)
                .where(self.model.id == entity_id)
                .execution_options(synchronize_session="evaluate")
            )
            if result.rowcount == 0:
                logger.info("repo.delete.not_found", extra={"model": self.model_name, "id": entity_id})
                raise NotFoundError(f"{self.model_name} with ID {entity_id} not found for deletion", fields=["id"])

        logger.info("repo.delete.success", extra={"model": self.model_name, "operation": "delete", "id": entity_id})
