# =============================================================================
# core/models/base.py - Shared Schema Building Blocks
# =============================================================================
# Every request schema accepts and emits camelCase keys, matching the
# stored documents. Python code uses snake_case attribute names.
#
# Also holds the nested structures shared by several entities
# (addresses, contacts, attached documents).
# =============================================================================

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model with camelCase aliases.

    Example:
        class ItemCreate(CamelModel):
            cost_price: float   # accepts/serializes as "costPrice"
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # Fields an update may set back to null. Any other null in an update
    # body is ignored so required values survive a partial write.
    clearable_fields: ClassVar[frozenset[str]] = frozenset()

    def to_document(self, partial: bool = False) -> dict[str, Any]:
        """
        Serialize to a storable document dict (camelCase, JSON-safe).

        Args:
            partial: For updates - keep only fields the client sent.
                     Explicit nulls are kept for `clearable_fields` only.
                     Otherwise drop None values and keep defaults.
        """
        document = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=partial,
            exclude_none=not partial,
        )
        if partial:
            fields = type(self).model_fields
            cleared = {fields[name].alias or name for name in self.clearable_fields}
            document = {
                key: value for key, value in document.items()
                if value is not None or key in cleared
            }
        return document


# -----------------------------------------------------------------------------
# Nested structures
# -----------------------------------------------------------------------------

class Address(CamelModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class Contact(CamelModel):
    name: str = Field(..., min_length=1)
    title: str | None = None
    email: str | None = None
    phone: str | None = None


class Dimensions(CamelModel):
    length: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)
    depth: float | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    unit: str | None = None
    weight_unit: str | None = None


class AttachedDocument(CamelModel):
    """A file attached to a project or shipment."""
    title: str | None = None
    file_url: str | None = None
    file_type: str | None = None
    category: str | None = None
    uploaded_at: datetime | None = None
