from decimal import Decimal
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from src.app.api.dependencies import AuthenticatedPrincipal, get_current_admin
from src.app.config import Settings
from src.app.containers import Container
from src.app.core.services.client_catalog_service import ClientCatalogService
from src.app.logging import get_logger
from src.client.schemas import (
    ClientView,
    CreateClientRequest,
    FilterCriteria,
    PagedResult,
    SexEnum,
    UpdateClientRequest,
)
from src.shared.exceptions import ConflictingEntityFound, DataCorruption, InvalidInput, StorageFailure

router = APIRouter(prefix="/clients", tags=["clients"], dependencies=[Depends(get_current_admin)])
logger = get_logger(__name__)

SERVICE_UNAVAILABLE = "Service unavailable. Please try again later."


@router.get("/", response_model=PagedResult[ClientView])
@inject
async def list_clients(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_admin)],
    email: Annotated[str | None, Query()] = None,
    first_name: Annotated[str | None, Query(alias="firstName")] = None,
    last_name: Annotated[str | None, Query(alias="lastName")] = None,
    personal_id: Annotated[str | None, Query(alias="personalId")] = None,
    mobile_number: Annotated[str | None, Query(alias="mobileNumber")] = None,
    sex: Annotated[SexEnum | None, Query()] = None,
    search_term: Annotated[str | None, Query(alias="searchTerm", description="Matched against names, email, IDs, city, street and account numbers")] = None,
    country: Annotated[str | None, Query()] = None,
    city: Annotated[str | None, Query()] = None,
    street: Annotated[str | None, Query()] = None,
    zip_code: Annotated[str | None, Query(alias="zipCode")] = None,
    account_number: Annotated[str | None, Query(alias="accountNumber")] = None,
    account_type: Annotated[str | None, Query(alias="accountType")] = None,
    min_balance: Annotated[Decimal | None, Query(alias="minBalance")] = None,
    max_balance: Annotated[Decimal | None, Query(alias="maxBalance")] = None,
    sort_by: Annotated[str | None, Query(alias="sortBy", description="firstName, lastName, email, personalId or mobileNumber")] = None,
    sort_descending: Annotated[bool, Query(alias="sortDescending")] = False,
    page_number: Annotated[int, Query(alias="pageNumber", ge=1)] = 1,
    page_size: Annotated[int | None, Query(alias="pageSize", ge=1)] = None,
    service: ClientCatalogService = Depends(Provide[Container.client_catalog_service]),
    config: Settings = Depends(Provide[Container.config]),
) -> PagedResult[ClientView]:
    """
    List clients with filtering, sorting and paging.

    Every listing is recorded in the calling admin's search history.
    """
    effective_page_size = page_size if page_size is not None else config.pagination.default_page_size
    if effective_page_size > config.pagination.max_page_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"pageSize cannot exceed {config.pagination.max_page_size}",
        )

    criteria = FilterCriteria(
        email=email,
        first_name=first_name,
        last_name=last_name,
        personal_id=personal_id,
        mobile_number=mobile_number,
        sex=sex,
        search_term=search_term,
        country=country,
        city=city,
        street=street,
        zip_code=zip_code,
        account_number=account_number,
        account_type=account_type,
        min_balance=min_balance,
        max_balance=max_balance,
        sort_by=sort_by,
        sort_descending=sort_descending,
        page_number=page_number,
        page_size=effective_page_size,
    )
    try:
        return await service.list_clients(criteria, principal.id)
    except InvalidInput as e:
        logger.error(f"Rejected client listing: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageFailure as e:
        logger.error(f"An error occurred while listing clients: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE)


@router.get("/last-searches", response_model=list[FilterCriteria])
@inject
async def get_last_searches(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_admin)],
    service: ClientCatalogService = Depends(Provide[Container.client_catalog_service]),
    config: Settings = Depends(Provide[Container.config]),
) -> list[FilterCriteria]:
    """Get the criteria of the calling admin's most recent client listings, newest first."""
    try:
        searches = await service.get_recent_searches(principal.id, config.recent_searches.limit)
    except DataCorruption as e:
        logger.error(f"Search history of admin {principal.id} is unreadable: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except StorageFailure as e:
        logger.error(f"An error occurred while retrieving recent searches: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE)

    if not searches:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No search parameters found.")
    return searches


@router.get("/{client_id}", response_model=ClientView)
@inject
async def get_client(
    client_id: Annotated[int, Path()],
    service: ClientCatalogService = Depends(Provide[Container.client_catalog_service]),
) -> ClientView:
    """Get a client by ID."""
    try:
        client = await service.get_client(client_id)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageFailure as e:
        logger.error(f"An error occurred while retrieving client {client_id}: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE)

    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Client with ID {client_id} not found.")
    return client


@router.post("/", response_model=ClientView, status_code=status.HTTP_201_CREATED)
@inject
async def create_client(
    request: CreateClientRequest,
    service: ClientCatalogService = Depends(Provide[Container.client_catalog_service]),
) -> ClientView:
    """Create a new client with its address and accounts."""
    try:
        return await service.create_client(request)
    except ConflictingEntityFound as e:
        logger.error(f"Failed to create client: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageFailure as e:
        logger.error(f"An error occurred while creating client: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE)


@router.put("/", response_model=ClientView)
@inject
async def update_client(
    request: UpdateClientRequest,
    service: ClientCatalogService = Depends(Provide[Container.client_catalog_service]),
) -> ClientView:
    """Update an existing client. Accounts are matched by ID and never added or removed."""
    try:
        client = await service.update_client(request)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictingEntityFound as e:
        logger.error(f"Failed to update client: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageFailure as e:
        logger.error(f"An error occurred while updating client {request.client_id}: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE)

    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Client with ID {request.client_id} not found.")
    return client


@router.delete("/{client_id}")
@inject
async def delete_client(
    client_id: Annotated[int, Path()],
    service: ClientCatalogService = Depends(Provide[Container.client_catalog_service]),
) -> dict[str, str]:
    """Delete a client together with its address and accounts."""
    try:
        deleted = await service.delete_client(client_id)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageFailure as e:
        logger.error(f"An error occurred while deleting client {client_id}: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Client with ID {client_id} not found.")
    return {"message": f"Client with ID {client_id} has been successfully deleted."}
