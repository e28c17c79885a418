"""Append-only history of the client listings each admin ran."""
import logging
from datetime import datetime, UTC

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.app.core.domain.models import SearchRecord
from src.app.infrastructure.search_record_repository import SearchRecordRepository
from src.client.schemas import FilterCriteria
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.exceptions import DataCorruption, InvalidInput, StorageFailure

logger = logging.getLogger(__name__)


def serialize_criteria(criteria: FilterCriteria) -> str:
    return criteria.model_dump_json(by_alias=True)


def deserialize_criteria(blob: str) -> FilterCriteria:
    return FilterCriteria.model_validate_json(blob)


class RecentSearchLog:
    """Records every executed FilterCriteria per admin and returns the most recent ones."""

    def __init__(self, repository: SearchRecordRepository, unit_of_work: UnitOfWork):
        self.repository = repository
        self.unit_of_work = unit_of_work

    async def record(self, admin_id: str, criteria: FilterCriteria) -> SearchRecord:
        """
        Append a search record for the admin.

        Args:
            admin_id: Identifier of the admin who ran the listing
            criteria: The criteria the listing ran with

        Returns:
            The stored record
        """
        if not admin_id:
            raise InvalidInput("admin_id", "An admin identifier is required")

        record = SearchRecord(
            admin_id=admin_id,
            search_criteria=serialize_criteria(criteria),
            search_timestamp=datetime.now(UTC),
        )
        try:
            async with self.unit_of_work:
                entity = self.unit_of_work.add(record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to record search for admin {admin_id}: {e}")
            raise StorageFailure("record search") from e

        logger.info(f"Recorded search {entity.id} for admin {admin_id}")
        return record.model_copy(update={"id": entity.id})

    async def last_n(self, admin_id: str, n: int) -> list[FilterCriteria]:
        """
        Get the criteria of the admin's `n` most recent searches, newest first.

        Raises:
            InvalidInput: If n is not positive
            DataCorruption: If a stored record cannot be decoded
        """
        if n < 1:
            raise InvalidInput("n", "Must be a positive integer")

        records = await self.repository.get_last_for_admin(admin_id, n)
        criteria = []
        for record in records:
            try:
                criteria.append(deserialize_criteria(record.search_criteria))
            except ValidationError as e:
                logger.error(f"Search record {record.id} of admin {admin_id} is corrupt: {e}")
                raise DataCorruption("SearchRecord", record.id) from e
        return criteria
