from sqlalchemy import select

from src.app.core.domain.models import SearchRecord
from src.shared.database.base_repo import BaseRepository
from src.shared.database.database import Database
from src.app.infrastructure.entities.search_record_entity import SearchRecordEntity
from src.app.infrastructure.mappers.search_record_mapper import SearchRecordMapper


class SearchRecordRepository(BaseRepository[SearchRecordEntity, SearchRecord]):
    """Repository for reading the admin search history."""

    def __init__(self, db: Database, mapper: SearchRecordMapper):
        super().__init__(db, mapper)

    async def get_last_for_admin(self, admin_id: str, limit: int) -> list[SearchRecord]:
        """Get the newest search records of an admin, newest first."""
        return await self.find_all(
            select(SearchRecordEntity)
            .where(SearchRecordEntity.admin_id == admin_id)
            .order_by(SearchRecordEntity.search_timestamp.desc(), SearchRecordEntity.id.desc())
            .limit(limit)
        )
