"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    email: EmailStr
    phone: str = ""
    company_name: str = ""

    @field_validator("first_name", "last_name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional: only supplied fields will be updated.
    Running totals and segment are never updatable from outside.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    company_name: str | None = None
    is_active: bool | None = None
