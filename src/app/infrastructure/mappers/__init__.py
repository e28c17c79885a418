"""Infrastructure mappers for converting between domain models and database entities."""
from src.app.infrastructure.mappers.client_mapper import ClientMapper
from src.app.infrastructure.mappers.search_record_mapper import SearchRecordMapper

__all__ = [
    "ClientMapper",
    "SearchRecordMapper",
]
