from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import IntegrityError

from src.client.schemas import (
    AddressRequest,
    FilterCriteria,
    SexEnum,
    UpdateAccountRequest,
    UpdateClientRequest,
)
from src.shared.exceptions import ConflictingEntityFound, InvalidInput, StorageFailure
from tests.factories import build_create_request, count_searches


def build_update_request(client_id: int, **overrides) -> UpdateClientRequest:
    fields = dict(
        client_id=client_id,
        email="ana.smith@example.com",
        first_name="Ana",
        last_name="Smith",
        personal_id="12345678901",
        mobile_number="+35799123456",
        sex=SexEnum.FEMALE,
    )
    fields.update(overrides)
    return UpdateClientRequest(**fields)


# =========================================================================
# Listing
# =========================================================================

@pytest.mark.asyncio
async def test_list_clients_returns_page_with_totals(client_catalog_service):
    # Arrange
    for index in range(3):
        await client_catalog_service.create_client(build_create_request(personal_id=f"1234567890{index}"))

    # Act
    page = await client_catalog_service.list_clients(FilterCriteria(page_size=2), "admin-1")

    # Assert
    assert len(page.items) == 2
    assert page.total_items == 3
    assert page.total_pages == 2
    assert page.page_number == 1
    assert page.page_size == 2


@pytest.mark.asyncio
async def test_list_clients_records_search_even_without_matches(client_catalog_service, search_record_repository):
    # Act
    page = await client_catalog_service.list_clients(FilterCriteria(first_name="Nobody"), "admin-1")

    # Assert
    assert page.items == []
    assert page.total_items == 0
    assert page.total_pages == 0
    assert await count_searches(search_record_repository, "admin-1") == 1


@pytest.mark.asyncio
async def test_list_clients_records_search_once_per_call(client_catalog_service, search_record_repository):
    await client_catalog_service.list_clients(FilterCriteria(), "admin-1")
    await client_catalog_service.list_clients(FilterCriteria(city="Limassol"), "admin-1")

    assert await count_searches(search_record_repository, "admin-1") == 2
    recent = await client_catalog_service.get_recent_searches("admin-1", 3)
    assert [criteria.city for criteria in recent] == ["Limassol", None]


@pytest.mark.asyncio
async def test_search_is_recorded_when_query_fails(client_catalog_service, search_record_repository):
    # Arrange
    client_catalog_service.query_engine.query = AsyncMock(side_effect=StorageFailure("list Client"))

    # Act & Assert
    with pytest.raises(StorageFailure):
        await client_catalog_service.list_clients(FilterCriteria(last_name="Smith"), "admin-1")

    assert await count_searches(search_record_repository, "admin-1") == 1


@pytest.mark.asyncio
async def test_list_clients_requires_admin_id(client_catalog_service):
    with pytest.raises(InvalidInput):
        await client_catalog_service.list_clients(FilterCriteria(), "")


# =========================================================================
# Create and get
# =========================================================================

@pytest.mark.asyncio
async def test_create_client_assigns_ids(client_catalog_service, client_repository):
    # Arrange
    request = build_create_request(accounts=[("001", "Savings", "100"), ("002", "Checking", "0")])

    # Act
    created = await client_catalog_service.create_client(request)

    # Assert
    assert created.id > 0
    assert created.address.id is not None
    assert all(account.id > 0 for account in created.accounts)
    assert [account.account_number for account in created.accounts] == ["001", "002"]
    stored = await client_repository.get_by_personal_id("12345678901")
    assert stored is not None
    assert stored.id == created.id
    assert stored.address.city == "Limassol"


@pytest.mark.asyncio
async def test_create_client_raises_conflict_on_duplicate_personal_id(client_catalog_service):
    # Arrange
    await client_catalog_service.create_client(build_create_request(first_name="Ana"))

    # Act & Assert
    with pytest.raises(ConflictingEntityFound) as exc_info:
        await client_catalog_service.create_client(build_create_request(first_name="Other"))

    assert exc_info.value.field_name == "personal_id"
    assert exc_info.value.field_value == "12345678901"


@pytest.mark.asyncio
async def test_get_client_successfully(client_catalog_service):
    created = await client_catalog_service.create_client(build_create_request())

    found = await client_catalog_service.get_client(created.id)

    assert found == created


@pytest.mark.asyncio
async def test_get_client_returns_none_when_absent(client_catalog_service):
    assert await client_catalog_service.get_client(999) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("client_id", [0, -5])
async def test_get_client_rejects_non_positive_id(client_catalog_service, client_id):
    with pytest.raises(InvalidInput):
        await client_catalog_service.get_client(client_id)


# =========================================================================
# Update
# =========================================================================

@pytest.mark.asyncio
async def test_update_client_overwrites_scalars_and_address(client_catalog_service):
    # Arrange
    created = await client_catalog_service.create_client(build_create_request())
    request = build_update_request(
        created.id,
        first_name="Anna",
        email="anna@example.com",
        sex=SexEnum.OTHER,
        address=AddressRequest(country="Greece", city="Athens", street="Ermou 5", zip_code="10563"),
    )

    # Act
    updated = await client_catalog_service.update_client(request)

    # Assert
    stored = await client_catalog_service.get_client(created.id)
    assert updated == stored
    assert stored.first_name == "Anna"
    assert stored.email == "anna@example.com"
    assert stored.sex == SexEnum.OTHER
    assert stored.address.id == created.address.id
    assert stored.address.city == "Athens"


@pytest.mark.asyncio
async def test_update_client_without_address_keeps_it(client_catalog_service):
    created = await client_catalog_service.create_client(build_create_request())

    await client_catalog_service.update_client(build_update_request(created.id, last_name="Jones"))

    stored = await client_catalog_service.get_client(created.id)
    assert stored.last_name == "Jones"
    assert stored.address == created.address


@pytest.mark.asyncio
async def test_update_client_merges_accounts_by_id(client_catalog_service):
    # Arrange
    created = await client_catalog_service.create_client(
        build_create_request(accounts=[("001", "Savings", "100"), ("002", "Checking", "20")])
    )
    first, second = created.accounts
    request = build_update_request(
        created.id,
        accounts=[UpdateAccountRequest(id=first.id, account_number="001", account_type="Savings", balance=Decimal("500"))],
    )

    # Act
    await client_catalog_service.update_client(request)

    # Assert
    stored = await client_catalog_service.get_client(created.id)
    assert len(stored.accounts) == 2
    assert stored.accounts[0].id == first.id
    assert stored.accounts[0].balance == Decimal("500")
    assert stored.accounts[1].id == second.id
    assert stored.accounts[1].balance == Decimal("20")


@pytest.mark.asyncio
async def test_update_client_ignores_unknown_account_ids(client_catalog_service):
    # Arrange
    created = await client_catalog_service.create_client(build_create_request())
    request = build_update_request(
        created.id,
        accounts=[UpdateAccountRequest(id=9999, account_number="999", account_type="Savings", balance=Decimal("1"))],
    )

    # Act
    await client_catalog_service.update_client(request)

    # Assert
    stored = await client_catalog_service.get_client(created.id)
    assert stored.accounts == created.accounts


@pytest.mark.asyncio
async def test_update_client_returns_none_when_absent(client_catalog_service):
    assert await client_catalog_service.update_client(build_update_request(999)) is None


@pytest.mark.asyncio
async def test_update_client_raises_conflict_on_taken_personal_id(client_catalog_service):
    # Arrange
    await client_catalog_service.create_client(build_create_request(personal_id="12345678901"))
    other = await client_catalog_service.create_client(build_create_request(personal_id="12345678902"))

    # Act & Assert
    with pytest.raises(ConflictingEntityFound):
        await client_catalog_service.update_client(build_update_request(other.id, personal_id="12345678901"))


@pytest.mark.asyncio
async def test_update_client_keeping_own_personal_id_is_not_a_conflict(client_catalog_service):
    created = await client_catalog_service.create_client(build_create_request())

    updated = await client_catalog_service.update_client(build_update_request(created.id, first_name="Anna"))

    assert updated.personal_id == created.personal_id
    assert updated.first_name == "Anna"


@pytest.mark.asyncio
async def test_concurrent_duplicate_insert_raises_conflict(client_catalog_service):
    # Arrange - the lookup misses, so the unique index rejects the insert
    await client_catalog_service.create_client(build_create_request())
    client_catalog_service.repository.get_by_personal_id = AsyncMock(return_value=None)

    # Act & Assert
    with pytest.raises(ConflictingEntityFound) as exc_info:
        await client_catalog_service.create_client(build_create_request(first_name="Other"))

    assert exc_info.value.field_value == "12345678901"


@pytest.mark.asyncio
async def test_other_integrity_errors_raise_storage_failure(client_catalog_service):
    # Arrange
    client_catalog_service.unit_of_work.add = Mock(
        side_effect=IntegrityError("INSERT INTO clients", {}, Exception("NOT NULL constraint failed: clients.email"))
    )

    # Act & Assert
    with pytest.raises(StorageFailure) as exc_info:
        await client_catalog_service.create_client(build_create_request())

    assert not isinstance(exc_info.value, ConflictingEntityFound)


# =========================================================================
# Delete
# =========================================================================

@pytest.mark.asyncio
async def test_delete_client_removes_client(client_catalog_service, client_repository):
    # Arrange
    created = await client_catalog_service.create_client(build_create_request())

    # Act
    deleted = await client_catalog_service.delete_client(created.id)

    # Assert
    assert deleted is True
    assert await client_catalog_service.get_client(created.id) is None
    assert await client_repository.count_clients(None) == 0


@pytest.mark.asyncio
async def test_delete_client_returns_false_when_absent(client_catalog_service):
    assert await client_catalog_service.delete_client(999) is False
