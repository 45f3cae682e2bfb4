# =============================================================================
# core/models/customer.py - Customer Schemas
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field

from .base import Address, CamelModel, Contact


class CustomerSize(str, Enum):
    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PROSPECT = "prospect"
    FORMER = "former"


class CustomerCreate(CamelModel):
    """
    Schema for creating a customer.

    Required: companyName, industry, size, primaryContact, accountManager.
    """
    company_name: str | None = Field(default=None, max_length=200)
    industry: str | None = None
    size: CustomerSize | None = None
    website: str | None = None
    annual_revenue: float | None = Field(default=None, ge=0)
    logo: str | None = None
    address: Address | None = None
    primary_contact: Contact | None = None
    secondary_contacts: list[Contact] = Field(default_factory=list)
    account_manager: str | None = None
    customer_since: datetime | None = None
    contract_value: float | None = Field(default=None, ge=0)
    contract_renewal_date: datetime | None = None
    nps: int | None = Field(default=None, ge=0, le=10)
    status: CustomerStatus = CustomerStatus.ACTIVE
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None


class CustomerUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset(
        {"website", "logo", "account_manager", "notes"}
    )

    company_name: str | None = Field(default=None, min_length=1, max_length=200)
    industry: str | None = None
    size: CustomerSize | None = None
    website: str | None = None
    annual_revenue: float | None = Field(default=None, ge=0)
    logo: str | None = None
    address: Address | None = None
    primary_contact: Contact | None = None
    secondary_contacts: list[Contact] | None = None
    account_manager: str | None = None
    customer_since: datetime | None = None
    contract_value: float | None = Field(default=None, ge=0)
    contract_renewal_date: datetime | None = None
    nps: int | None = Field(default=None, ge=0, le=10)
    status: CustomerStatus | None = None
    tags: list[str] | None = None
    notes: str | None = None
