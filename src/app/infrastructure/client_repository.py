from typing import Optional

from sqlalchemy import select, ColumnElement, true

from src.app.core.domain.models import Client
from src.shared.database.base_repo import BaseRepository
from src.shared.database.database import Database

from src.app.infrastructure.entities.client_entity import ClientEntity
from src.app.infrastructure.mappers.client_mapper import ClientMapper


class ClientRepository(BaseRepository[ClientEntity, Client]):
    """Repository for Client reads. Address and accounts are loaded with every client."""

    def __init__(self, db: Database, mapper: ClientMapper):
        super().__init__(db, mapper)

    async def get_by_id(self, client_id: int) -> Optional[Client]:
        """Get a client by ID."""
        return await self.find_one(
            select(ClientEntity).where(ClientEntity.id == client_id)
        )

    async def get_by_personal_id(self, personal_id: str) -> Optional[Client]:
        """Get a client by personal ID."""
        return await self.find_one(
            select(ClientEntity).where(ClientEntity.personal_id == personal_id)
        )

    async def find_clients(
        self,
        predicate: ColumnElement[bool] | None,
        ordering: list[ColumnElement],
        skip: int,
        take: int,
    ) -> list[Client]:
        """
        Fetch one window of clients matching a predicate.

        Args:
            predicate: Filter over ClientEntity, None for all clients
            ordering: ORDER BY clauses applied before the window
            skip: Number of matching clients to skip
            take: Maximum number of clients to return

        Returns:
            Clients in the requested order
        """
        stmt = (
            select(ClientEntity)
            .where(predicate if predicate is not None else true())
            .order_by(*ordering)
            .offset(skip)
            .limit(take)
        )
        return await self.find_all(stmt)

    async def count_clients(self, predicate: ColumnElement[bool] | None) -> int:
        """Count all clients matching a predicate."""
        return await self.count(
            select(ClientEntity.id).where(predicate if predicate is not None else true())
        )
