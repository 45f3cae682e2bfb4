# =============================================================================
# core/models/supplier.py - Supplier Schemas
# =============================================================================

from enum import Enum

from pydantic import Field

from .base import Address, CamelModel, Contact


class SupplierStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLACKLISTED = "blacklisted"


class SupplierCreate(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    address: Address | None = None
    contact_person: Contact | None = None
    categories: list[str] = Field(default_factory=list)
    payment_terms: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    status: SupplierStatus = SupplierStatus.ACTIVE
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None


class SupplierUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    address: Address | None = None
    contact_person: Contact | None = None
    categories: list[str] | None = None
    payment_terms: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    status: SupplierStatus | None = None
    tags: list[str] | None = None
    notes: str | None = None
