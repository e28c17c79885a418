"""API schemas for client requests, listing criteria and responses."""
import math
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

MOBILE_NUMBER_PATTERN = r"^\+[1-9]\d{1,14}$"


class SexEnum(str, Enum):
    """Client sex enum for API."""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class AddressRequest(BaseModel):
    """Address fields supplied when creating or updating a client."""
    country: str = Field(..., min_length=1, description="Country is required")
    city: str = Field(..., min_length=1, description="City is required")
    street: str = Field(..., min_length=1, description="Street is required")
    zip_code: str = Field(..., min_length=1, description="Zip code is required")

    @field_validator("country", "city", "street", "zip_code")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Ensure address fields are not just whitespace."""
        if not v.strip():
            raise ValueError("Field cannot be blank or only whitespace")
        return v.strip()


class CreateAccountRequest(BaseModel):
    """Account opened together with a new client."""
    account_number: str = Field(..., min_length=1, description="Account number is required")
    account_type: str = Field(..., min_length=1, description="Account type is required")
    balance: Decimal = Field(default=Decimal("0"), ge=0, description="Balance must be a non-negative amount")


class UpdateAccountRequest(CreateAccountRequest):
    """Replacement values for an existing account of the client."""
    id: int = Field(..., gt=0, description="ID of the account to update")


class _ClientFields(BaseModel):
    email: EmailStr = Field(..., description="Email address is required")
    first_name: str = Field(..., min_length=1, max_length=60)
    last_name: str = Field(..., min_length=1, max_length=60)
    personal_id: str = Field(..., min_length=11, max_length=11, description="Personal ID must be exactly 11 characters")
    profile_photo: str | None = None
    mobile_number: str = Field(..., pattern=MOBILE_NUMBER_PATTERN, description="Mobile number in international format")
    sex: SexEnum

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Ensure name fields are not just whitespace."""
        if not v or not v.strip():
            raise ValueError("Field cannot be blank or only whitespace")
        return v.strip()


class CreateClientRequest(_ClientFields):
    """Request schema for creating a new client."""
    address: AddressRequest
    accounts: list[CreateAccountRequest] = Field(..., min_length=1, description="At least one account is required")


class UpdateClientRequest(_ClientFields):
    """
    Request schema for updating an existing client.

    Scalar fields are overwritten. The address is replaced when given. Accounts are
    matched by ID and updated in place; IDs that do not belong to the client are ignored.
    """
    client_id: int = Field(..., gt=0, description="ID of the client to update")
    address: AddressRequest | None = None
    accounts: list[UpdateAccountRequest] = Field(default_factory=list)


class FilterCriteria(BaseModel):
    """
    Filtering, sorting and paging directives for a client listing.

    Every filter is optional and filters are AND-combined. `search_term` matches
    when any of the searchable fields contains it.
    """
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    personal_id: str | None = None
    mobile_number: str | None = None
    sex: SexEnum | None = None
    search_term: str | None = None
    country: str | None = None
    city: str | None = None
    street: str | None = None
    zip_code: str | None = None
    account_number: str | None = None
    account_type: str | None = None
    min_balance: Decimal | None = None
    max_balance: Decimal | None = None
    sort_by: str | None = None
    sort_descending: bool = False
    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator(
        "email", "first_name", "last_name", "personal_id", "mobile_number", "search_term",
        "country", "city", "street", "zip_code", "account_number", "account_type", "sort_by",
        "sex", "min_balance", "max_balance",
        mode="before",
    )
    @classmethod
    def empty_as_absent(cls, v):
        """Treat empty strings as an unset filter."""
        if isinstance(v, str) and v == "":
            return None
        return v

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size


class AddressView(BaseModel):
    """Address as returned by the API."""
    id: int | None = None
    country: str
    city: str
    street: str
    zip_code: str

    model_config = {"from_attributes": True}


class AccountView(BaseModel):
    """Account as returned by the API."""
    id: int
    account_number: str
    account_type: str
    balance: Decimal

    model_config = {"from_attributes": True}


class ClientView(BaseModel):
    """Client profile with its address and accounts flattened in."""
    id: int
    email: str
    first_name: str
    last_name: str
    personal_id: str
    profile_photo: str | None = None
    mobile_number: str
    sex: SexEnum
    address: AddressView
    accounts: list[AccountView] = Field(default_factory=list)

    model_config = {"from_attributes": True}


T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    """One page of items plus the paging figures of the whole result set."""
    items: list[T] = Field(default_factory=list)
    total_items: int = Field(..., ge=0, description="Number of matches ignoring paging")
    page_number: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)
