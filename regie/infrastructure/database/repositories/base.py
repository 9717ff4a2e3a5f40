"""
Base repository implementation shared by the SQLModel repositories.

Updates and deletes are compare-and-set on the ``version`` column: a
statement that matches no row means another transaction changed the record
since it was read.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel

from regie.core.observability import get_logger
from regie.domain.shared.base import AggregateRoot, Entity
from regie.domain.shared.exceptions import ConcurrentModificationError

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


class RepositoryError(Exception):
    """Base exception for repository layer errors."""


class DatabaseError(RepositoryError):
    """Raised when a database operation fails."""


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing versioned writes.

    Concrete repositories set ``model`` and ``entity_type`` and map rows to
    domain entities through their mapper.
    """

    model: type[ModelType]
    entity_type: str

    def __init__(self, session: Session, tracker: list[AggregateRoot] | None = None):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session owned by the unit of work
            tracker: Aggregates whose domain events the unit of work publishes
                after commit
        """
        self.session = session
        self._tracker = tracker if tracker is not None else []

    def _track(self, aggregate: AggregateRoot) -> None:
        if aggregate not in self._tracker:
            self._tracker.append(aggregate)

    def _insert(self, row: ModelType) -> None:
        try:
            self.session.add(row)
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error inserting {self.entity_type}: {str(e)}"
            ) from e

    def _get_row(self, entity_id: UUID) -> ModelType | None:
        try:
            return self.session.get(self.model, entity_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error loading {self.entity_type} {entity_id}: {str(e)}"
            ) from e

    def _exec_all(self, statement: Any) -> list[ModelType]:
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error querying {self.entity_type}: {str(e)}"
            ) from e

    def _versioned_update(self, entity: Entity, values: dict[str, Any]) -> None:
        """
        Write ``values`` if the stored version still equals ``entity.version``.

        On success the entity's version is bumped in place.

        Raises:
            ConcurrentModificationError: If no row matched id and version
            DatabaseError: If the statement fails
        """
        statement = (
            update(self.model)
            .where(self.model.id == entity.id, self.model.version == entity.version)
            .values(**values, version=entity.version + 1)
        )
        try:
            result = self.session.execute(statement)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error updating {self.entity_type} {entity.id}: {str(e)}"
            ) from e

        if result.rowcount != 1:
            logger.warning(
                "version_conflict",
                entity_type=self.entity_type,
                entity_id=str(entity.id),
                expected_version=entity.version,
            )
            raise ConcurrentModificationError(self.entity_type, entity.id)
        entity.version += 1

    def _versioned_delete(self, entity: Entity) -> None:
        statement = delete(self.model).where(
            self.model.id == entity.id, self.model.version == entity.version
        )
        try:
            result = self.session.execute(statement)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error deleting {self.entity_type} {entity.id}: {str(e)}"
            ) from e

        if result.rowcount != 1:
            raise ConcurrentModificationError(self.entity_type, entity.id)

    def _delete_where(self, *criteria: Any) -> int:
        try:
            result = self.session.execute(delete(self.model).where(*criteria))
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error deleting {self.entity_type} rows: {str(e)}"
            ) from e
        return result.rowcount
