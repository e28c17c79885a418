"""Python client and API schemas for the Banking Control Panel API."""
from src.client.banking_client import BankingControlPanelClient
from src.client.schemas import (
    AccountView,
    AddressRequest,
    AddressView,
    ClientView,
    CreateAccountRequest,
    CreateClientRequest,
    FilterCriteria,
    PagedResult,
    SexEnum,
    UpdateAccountRequest,
    UpdateClientRequest,
)

__all__ = [
    "BankingControlPanelClient",
    "AccountView",
    "AddressRequest",
    "AddressView",
    "ClientView",
    "CreateAccountRequest",
    "CreateClientRequest",
    "FilterCriteria",
    "PagedResult",
    "SexEnum",
    "UpdateAccountRequest",
    "UpdateClientRequest",
]
