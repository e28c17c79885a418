"""Dependency injection container using dependency-injector library."""
from dependency_injector import containers, providers

from src.app.config import Settings
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.database.entity_mapper import EntityMapper

from src.app.infrastructure.mappers.client_mapper import ClientMapper
from src.app.infrastructure.mappers.search_record_mapper import SearchRecordMapper

from src.app.infrastructure.client_repository import ClientRepository
from src.app.infrastructure.search_record_repository import SearchRecordRepository

from src.app.core.services.client_query_engine import ClientQueryEngine
from src.app.core.services.recent_search_log import RecentSearchLog
from src.app.core.services.client_catalog_service import ClientCatalogService

from src.app.core.domain.models import Client, SearchRecord


def create_entity_mapper(
    client_mapper: ClientMapper,
    search_record_mapper: SearchRecordMapper,
) -> EntityMapper:
    """Factory function to create EntityMapper with proper mappings."""
    return EntityMapper(
        entity_mappings={
            Client: client_mapper.to_entity,
            SearchRecord: search_record_mapper.to_entity,
        }
    )


class Container(containers.DeclarativeContainer):
    """Main application dependency injection container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "src.app.api.v1.clients",
            "src.app.api.dependencies",
        ]
    )

    # =========================================================================
    # CONFIGURATION - Singleton (loaded once, cached)
    # =========================================================================
    config = providers.Singleton(Settings)

    # =========================================================================
    # SINGLETONS - Stateless Mappers (reusable across all requests)
    # =========================================================================
    client_mapper = providers.Singleton(ClientMapper)
    search_record_mapper = providers.Singleton(SearchRecordMapper)

    entity_mapper = providers.Singleton(
        create_entity_mapper,
        client_mapper=client_mapper,
        search_record_mapper=search_record_mapper,
    )

    # =========================================================================
    # SINGLETON - Database (shared connection pool)
    # =========================================================================
    database_settings = providers.Singleton(
        DatabaseSettings,
        db_url=config.provided.database_url,
        echo=config.provided.database_echo,
    )

    database = providers.Singleton(
        Database,
        db_settings=database_settings,
    )

    # =========================================================================
    # FACTORIES - Repositories (per-request, share database singleton)
    # =========================================================================
    client_repository = providers.Factory(
        ClientRepository,
        db=database,
        mapper=client_mapper,
    )

    search_record_repository = providers.Factory(
        SearchRecordRepository,
        db=database,
        mapper=search_record_mapper,
    )

    # =========================================================================
    # FACTORY - Unit of Work (per-request)
    # =========================================================================
    unit_of_work = providers.Factory(
        UnitOfWork,
        db=database,
        entity_mapper=entity_mapper,
    )

    # =========================================================================
    # FACTORIES - Services
    # =========================================================================
    client_query_engine = providers.Factory(
        ClientQueryEngine,
        repository=client_repository,
    )

    recent_search_log = providers.Factory(
        RecentSearchLog,
        repository=search_record_repository,
        unit_of_work=unit_of_work,
    )

    client_catalog_service = providers.Factory(
        ClientCatalogService,
        repository=client_repository,
        unit_of_work=unit_of_work,
        query_engine=client_query_engine,
        search_log=recent_search_log,
    )
