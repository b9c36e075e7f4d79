"""Transporter DTOs."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransporterDTO(BaseModel):
    """Immutable view of an active transporter (an assignment target)."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(alias="_id")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    business_name: Optional[str] = Field(default=None, alias="businessName")
    email: Optional[str] = None
    phone: Optional[str] = None
    vehicle_type: Optional[str] = Field(default=None, alias="vehicleType")
    is_online: bool = Field(default=False, alias="isOnline")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        if v is None or v == "":
            raise ValueError("Transporter id is missing.")
        return str(v)

    @property
    def display_name(self) -> str:
        if self.business_name:
            return self.business_name
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.id
