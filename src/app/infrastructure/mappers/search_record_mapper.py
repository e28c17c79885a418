from src.shared.database.base_mapper import BaseEntityMapper
from src.app.core.domain.models import SearchRecord
from src.app.infrastructure.entities.search_record_entity import SearchRecordEntity


class SearchRecordMapper(BaseEntityMapper[SearchRecord, SearchRecordEntity]):

    @staticmethod
    def to_entity(model_instance: SearchRecord) -> SearchRecordEntity:
        return SearchRecordEntity(
            id=model_instance.id,
            admin_id=model_instance.admin_id,
            search_criteria=model_instance.search_criteria,
            search_timestamp=model_instance.search_timestamp,
        )

    @staticmethod
    def to_model(entity: SearchRecordEntity) -> SearchRecord:
        return SearchRecord(
            id=entity.id,
            admin_id=entity.admin_id,
            search_criteria=entity.search_criteria,
            search_timestamp=entity.search_timestamp,
        )
