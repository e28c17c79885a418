"""Database entities for the infrastructure layer."""
from src.app.infrastructure.entities.client_entity import ClientEntity, AddressEntity, AccountEntity, ClientSex
from src.app.infrastructure.entities.search_record_entity import SearchRecordEntity

__all__ = [
    "ClientEntity",
    "AddressEntity",
    "AccountEntity",
    "ClientSex",
    "SearchRecordEntity",
]
