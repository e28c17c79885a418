from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from src.app.core.domain.models import Account, Address, Client, SearchRecord, Sex
from tests.factories import count_searches


def make_client(personal_id: str = "12345678901") -> Client:
    return Client(
        email="jane@example.com",
        first_name="Jane",
        last_name="Roe",
        personal_id=personal_id,
        mobile_number="+35799123456",
        sex=Sex.FEMALE,
        address=Address(country="Cyprus", city="Larnaca", street="Harbour 2", zip_code="6020"),
        accounts=[Account(account_number="001", account_type="Savings", balance=Decimal("10"))],
    )


@pytest.mark.asyncio
async def test_add_commits_on_clean_exit(unit_of_work, client_repository):
    # Act
    async with unit_of_work:
        entity = unit_of_work.add(make_client())

    # Assert
    assert entity.id is not None
    stored = await client_repository.get_by_id(entity.id)
    assert stored is not None
    assert stored.accounts[0].id == entity.accounts[0].id


@pytest.mark.asyncio
async def test_rolls_back_when_block_raises(unit_of_work, client_repository):
    # Act
    with pytest.raises(RuntimeError):
        async with unit_of_work:
            unit_of_work.add(make_client())
            raise RuntimeError("boom")

    # Assert
    assert await client_repository.count_clients(None) == 0


@pytest.mark.asyncio
async def test_failed_commit_rolls_back_whole_block(unit_of_work, client_repository):
    # Arrange
    async with unit_of_work:
        unit_of_work.add(make_client())

    # Act
    with pytest.raises(IntegrityError):
        async with unit_of_work:
            unit_of_work.add(make_client(personal_id="12345678902"))
            unit_of_work.add(make_client(personal_id="12345678901"))

    # Assert
    assert await client_repository.count_clients(None) == 1


@pytest.mark.asyncio
async def test_update_merges_existing_rows(unit_of_work, client_repository):
    # Arrange
    async with unit_of_work:
        entity = unit_of_work.add(make_client())
    client = await client_repository.get_by_id(entity.id)
    client.last_name = "Doe"
    client.accounts[0].balance = Decimal("75")

    # Act
    async with unit_of_work:
        await unit_of_work.update(client)

    # Assert
    stored = await client_repository.get_by_id(entity.id)
    assert stored.last_name == "Doe"
    assert stored.accounts[0].id == client.accounts[0].id
    assert stored.accounts[0].balance == Decimal("75")


@pytest.mark.asyncio
async def test_delete_removes_aggregate(unit_of_work, client_repository):
    # Arrange
    async with unit_of_work:
        entity = unit_of_work.add(make_client())
    client = await client_repository.get_by_id(entity.id)

    # Act
    async with unit_of_work:
        await unit_of_work.delete(client)

    # Assert
    assert await client_repository.get_by_id(entity.id) is None


def test_unmapped_model_is_rejected(unit_of_work):
    with pytest.raises(ValueError):
        unit_of_work._map_to_entity(object())


@pytest.mark.asyncio
async def test_search_records_are_mapped(unit_of_work, search_record_repository):
    async with unit_of_work:
        unit_of_work.add(SearchRecord(admin_id="admin-9", search_criteria="{}"))

    assert await count_searches(search_record_repository, "admin-9") == 1
