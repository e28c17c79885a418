"""Domain models used in business logic."""
from datetime import datetime, UTC
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, EmailStr, Field


class Sex(StrEnum):
    """Sex recorded on a client profile."""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Address(BaseModel):
    """Domain model for the Address owned by a Client."""
    id: int | None = Field(default=None, description="Store-assigned address ID")
    country: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)

    model_config = {"from_attributes": True}


class Account(BaseModel):
    """Domain model for an Account owned by a Client."""
    id: int | None = Field(default=None, description="Store-assigned account ID")
    account_number: str = Field(..., min_length=1)
    account_type: str = Field(..., min_length=1)
    balance: Decimal = Field(default=Decimal("0"), description="Current balance, currency agnostic")

    model_config = {"from_attributes": True}


class AccountChange(BaseModel):
    """Replacement values for an existing account, addressed by its ID."""
    id: int
    account_number: str
    account_type: str
    balance: Decimal


class Client(BaseModel):
    """Domain model for Client used in business logic."""
    id: int | None = Field(default=None, description="Store-assigned client ID")
    email: EmailStr = Field(..., description="Email address is required")
    first_name: str = Field(..., min_length=1, description="First name cannot be blank")
    last_name: str = Field(..., min_length=1, description="Last name cannot be blank")
    personal_id: str = Field(..., min_length=11, max_length=11, description="Unique 11 character personal ID")
    profile_photo: str | None = None
    mobile_number: str = Field(..., min_length=1)
    sex: Sex
    address: Address
    accounts: list[Account] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    def relocate(self, address: Address) -> None:
        """Overwrite the address fields, keeping the stored address identity."""
        self.address = address.model_copy(update={"id": self.address.id})

    def merge_accounts(self, changes: list[AccountChange]) -> None:
        """
        Apply account changes by ID.

        Changes for unknown IDs are ignored; accounts without a change are left as they are.
        Accounts are never added or removed here.
        """
        by_id = {account.id: account for account in self.accounts}
        for change in changes:
            account = by_id.get(change.id)
            if account is None:
                continue
            account.account_number = change.account_number
            account.account_type = change.account_type
            account.balance = change.balance


class SearchRecord(BaseModel):
    """Immutable audit entry of one client listing executed by an admin."""
    id: int | None = None
    admin_id: str = Field(..., min_length=1)
    search_criteria: str = Field(..., description="Serialized FilterCriteria")
    search_timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"from_attributes": True, "frozen": True}
