"""Client catalog: listing with search audit, lookups and client lifecycle."""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.app.core.domain.models import Client, Address, Account, AccountChange, Sex
from src.app.core.services.client_query_engine import ClientQueryEngine
from src.app.core.services.recent_search_log import RecentSearchLog
from src.app.infrastructure.client_repository import ClientRepository
from src.client.schemas import (
    AccountView,
    AddressRequest,
    AddressView,
    ClientView,
    CreateClientRequest,
    FilterCriteria,
    PagedResult,
    SexEnum,
    UpdateClientRequest,
)
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.exceptions import ConflictingEntityFound, InvalidInput, StorageFailure

logger = logging.getLogger(__name__)


def to_client_view(client: Client) -> ClientView:
    """Project a Client aggregate to the view returned to callers."""
    return ClientView(
        id=client.id,
        email=str(client.email),
        first_name=client.first_name,
        last_name=client.last_name,
        personal_id=client.personal_id,
        profile_photo=client.profile_photo,
        mobile_number=client.mobile_number,
        sex=SexEnum(client.sex.value),
        address=AddressView(
            id=client.address.id,
            country=client.address.country,
            city=client.address.city,
            street=client.address.street,
            zip_code=client.address.zip_code,
        ),
        accounts=[
            AccountView(
                id=account.id,
                account_number=account.account_number,
                account_type=account.account_type,
                balance=account.balance,
            )
            for account in client.accounts
        ],
    )


def _to_address(request: AddressRequest) -> Address:
    return Address(
        country=request.country,
        city=request.city,
        street=request.street,
        zip_code=request.zip_code,
    )


def _require_positive_id(client_id: int) -> None:
    if client_id <= 0:
        raise InvalidInput("client_id", "Client ID must be a positive integer")


def _is_personal_id_conflict(error: IntegrityError) -> bool:
    # SQLite names the column, PostgreSQL the unique index ix_clients_personal_id
    return "personal_id" in str(error.orig)


class ClientCatalogService:
    """Service for handling Client business logic."""

    def __init__(
        self,
        repository: ClientRepository,
        unit_of_work: UnitOfWork,
        query_engine: ClientQueryEngine,
        search_log: RecentSearchLog,
    ):
        """
        Initialize the client catalog service.

        Args:
            repository: Repository for client reads
            unit_of_work: Unit of work for client writes
            query_engine: Engine running filtered, sorted and paged listings
            search_log: Audit log of the listings each admin ran
        """
        self.repository = repository
        self.unit_of_work = unit_of_work
        self.query_engine = query_engine
        self.search_log = search_log

    async def list_clients(self, criteria: FilterCriteria, admin_id: str) -> PagedResult[ClientView]:
        """
        List clients matching the criteria and record the search for the admin.

        The search is recorded before the query runs, so a listing that fails still
        leaves an audit entry.
        """
        logger.info(f"Listing clients for admin {admin_id}")
        await self.search_log.record(admin_id, criteria)

        clients, total_items = await self.query_engine.query(criteria)
        return PagedResult[ClientView](
            items=[to_client_view(client) for client in clients],
            total_items=total_items,
            page_number=criteria.page_number,
            page_size=criteria.page_size,
        )

    async def get_recent_searches(self, admin_id: str, n: int) -> list[FilterCriteria]:
        """Get the criteria of the admin's most recent listings, newest first."""
        return await self.search_log.last_n(admin_id, n)

    async def get_client(self, client_id: int) -> ClientView | None:
        """Get a client by ID, None when it does not exist."""
        _require_positive_id(client_id)
        client = await self.repository.get_by_id(client_id)
        if client is None:
            logger.warning(f"Client with ID {client_id} not found")
            return None
        return to_client_view(client)

    async def create_client(self, request: CreateClientRequest) -> ClientView:
        """Create a client together with its address and accounts."""
        client = Client(
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            personal_id=request.personal_id,
            profile_photo=request.profile_photo,
            mobile_number=request.mobile_number,
            sex=Sex(request.sex.value),
            address=_to_address(request.address),
            accounts=[
                Account(
                    account_number=account.account_number,
                    account_type=account.account_type,
                    balance=account.balance,
                )
                for account in request.accounts
            ],
        )

        if await self.repository.get_by_personal_id(request.personal_id) is not None:
            raise ConflictingEntityFound("Client", "personal_id", request.personal_id)

        # The unique index still guards against a concurrent insert of the same personal ID
        try:
            async with self.unit_of_work:
                entity = self.unit_of_work.add(client)
        except IntegrityError as e:
            if not _is_personal_id_conflict(e):
                logger.error(f"Failed to create client: {e}")
                raise StorageFailure("create client") from e
            raise ConflictingEntityFound("Client", "personal_id", request.personal_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to create client: {e}")
            raise StorageFailure("create client") from e

        logger.info(f"Created client {entity.id}")
        created = await self.repository.get_by_id(entity.id)
        if created is None:
            raise StorageFailure("read back created client")
        return to_client_view(created)

    async def update_client(self, request: UpdateClientRequest) -> ClientView | None:
        """
        Update an existing client, None when it does not exist.

        Accounts are merged by ID: matching accounts are overwritten, unknown IDs are
        ignored and accounts missing from the request are kept unchanged.
        """
        _require_positive_id(request.client_id)
        client = await self.repository.get_by_id(request.client_id)
        if client is None:
            logger.warning(f"Client with ID {request.client_id} not found")
            return None

        owner = await self.repository.get_by_personal_id(request.personal_id)
        if owner is not None and owner.id != request.client_id:
            raise ConflictingEntityFound("Client", "personal_id", request.personal_id)

        client.email = request.email
        client.first_name = request.first_name
        client.last_name = request.last_name
        client.personal_id = request.personal_id
        client.profile_photo = request.profile_photo
        client.mobile_number = request.mobile_number
        client.sex = Sex(request.sex.value)
        if request.address is not None:
            client.relocate(_to_address(request.address))
        client.merge_accounts([
            AccountChange(
                id=account.id,
                account_number=account.account_number,
                account_type=account.account_type,
                balance=account.balance,
            )
            for account in request.accounts
        ])

        try:
            async with self.unit_of_work:
                await self.unit_of_work.update(client)
        except IntegrityError as e:
            if not _is_personal_id_conflict(e):
                logger.error(f"Failed to update client {request.client_id}: {e}")
                raise StorageFailure("update client") from e
            raise ConflictingEntityFound("Client", "personal_id", request.personal_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to update client {request.client_id}: {e}")
            raise StorageFailure("update client") from e

        logger.info(f"Updated client {request.client_id}")
        return to_client_view(client)

    async def delete_client(self, client_id: int) -> bool:
        """Delete a client with its address and accounts. False when it does not exist."""
        _require_positive_id(client_id)
        client = await self.repository.get_by_id(client_id)
        if client is None:
            logger.warning(f"Client with ID {client_id} not found")
            return False

        try:
            async with self.unit_of_work:
                await self.unit_of_work.delete(client)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete client {client_id}: {e}")
            raise StorageFailure("delete client") from e

        logger.info(f"Deleted client {client_id}")
        return True
