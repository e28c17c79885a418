"""Translates FilterCriteria into a filtered, sorted and paged client query."""
import logging
from typing import Callable

from sqlalchemy import ColumnElement, and_, or_

from src.app.core.domain.models import Client
from src.app.infrastructure.client_repository import ClientRepository
from src.app.infrastructure.entities.client_entity import ClientEntity, AddressEntity, AccountEntity, ClientSex
from src.client.schemas import FilterCriteria

logger = logging.getLogger(__name__)


# Sort keys are compared lower-cased with underscores removed,
# so "firstName", "FIRSTNAME" and "first_name" all select the same column.
SORT_COLUMNS = {
    "firstname": ClientEntity.first_name,
    "lastname": ClientEntity.last_name,
    "email": ClientEntity.email,
    "personalid": ClientEntity.personal_id,
    "mobilenumber": ClientEntity.mobile_number,
}


def _contains(column, value: str) -> ColumnElement[bool]:
    return column.icontains(value, autoescape=True)


def _search_term_predicate(term: str) -> ColumnElement[bool]:
    return or_(
        _contains(ClientEntity.first_name, term),
        _contains(ClientEntity.last_name, term),
        _contains(ClientEntity.email, term),
        _contains(ClientEntity.personal_id, term),
        _contains(ClientEntity.mobile_number, term),
        ClientEntity.address.has(
            or_(_contains(AddressEntity.city, term), _contains(AddressEntity.street, term))
        ),
        ClientEntity.accounts.any(_contains(AccountEntity.account_number, term)),
    )


# Each rule turns one populated criteria field into one predicate.
_FIELD_RULES: list[tuple[str, Callable[[object], ColumnElement[bool]]]] = [
    ("search_term", _search_term_predicate),
    ("first_name", lambda v: _contains(ClientEntity.first_name, v)),
    ("last_name", lambda v: _contains(ClientEntity.last_name, v)),
    ("email", lambda v: _contains(ClientEntity.email, v)),
    ("personal_id", lambda v: ClientEntity.personal_id == v),
    ("mobile_number", lambda v: _contains(ClientEntity.mobile_number, v)),
    ("sex", lambda v: ClientEntity.sex == ClientSex(v.value)),
    ("country", lambda v: ClientEntity.address.has(_contains(AddressEntity.country, v))),
    ("city", lambda v: ClientEntity.address.has(_contains(AddressEntity.city, v))),
    ("street", lambda v: ClientEntity.address.has(_contains(AddressEntity.street, v))),
    ("zip_code", lambda v: ClientEntity.address.has(_contains(AddressEntity.zip_code, v))),
    ("account_number", lambda v: ClientEntity.accounts.any(_contains(AccountEntity.account_number, v))),
    ("account_type", lambda v: ClientEntity.accounts.any(_contains(AccountEntity.account_type, v))),
    ("min_balance", lambda v: ClientEntity.accounts.any(AccountEntity.balance >= v)),
    ("max_balance", lambda v: ClientEntity.accounts.any(AccountEntity.balance <= v)),
]


def build_predicates(criteria: FilterCriteria) -> list[ColumnElement[bool]]:
    """
    Build one predicate per populated filter field.

    Args:
        criteria: Listing criteria; None fields contribute nothing

    Returns:
        Predicates to be AND-combined, empty when nothing is filtered
    """
    return [
        rule(getattr(criteria, field_name))
        for field_name, rule in _FIELD_RULES
        if getattr(criteria, field_name) is not None
    ]


def build_filter(criteria: FilterCriteria) -> ColumnElement[bool] | None:
    """Fold the criteria predicates with AND; None means no constraint."""
    predicates = build_predicates(criteria)
    if not predicates:
        return None
    return and_(*predicates)


def resolve_ordering(sort_by: str | None, descending: bool) -> list[ColumnElement]:
    """
    Map a sort key to ORDER BY clauses.

    Unknown or empty keys keep the store default order (client ID). The client ID
    is always the last clause so clients with equal sort values keep a stable order.
    """
    column = SORT_COLUMNS.get((sort_by or "").replace("_", "").lower())
    if column is None:
        return [ClientEntity.id.asc()]
    return [column.desc() if descending else column.asc(), ClientEntity.id.asc()]


class ClientQueryEngine:
    """Runs client listings: filter, sort, then page, with the unpaged match count."""

    def __init__(self, repository: ClientRepository):
        self.repository = repository

    async def query(self, criteria: FilterCriteria) -> tuple[list[Client], int]:
        """
        Fetch the requested page of matching clients.

        Args:
            criteria: Filters, sort directive and paging

        Returns:
            Tuple of (clients on the page, number of matching clients ignoring paging)

        Raises:
            StorageFailure: If the store cannot be queried
        """
        predicate = build_filter(criteria)
        ordering = resolve_ordering(criteria.sort_by, criteria.sort_descending)

        total_count = await self.repository.count_clients(predicate)
        if criteria.skip >= total_count:
            # Past the last match, so no window to fetch
            logger.info(f"Client query matched {total_count} clients, page {criteria.page_number} is past the end")
            return [], total_count

        items = await self.repository.find_clients(
            predicate,
            ordering,
            skip=criteria.skip,
            take=criteria.page_size,
        )
        logger.info(
            f"Client query matched {total_count} clients, "
            f"returning {len(items)} for page {criteria.page_number} (size {criteria.page_size})"
        )
        return items, total_count
