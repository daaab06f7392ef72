"""
Authenticated user model
"""

from typing import Any

from pydantic import Field, field_validator

from mockprep.models.base import CamelModel


class CurrentUser(CamelModel):
    """The caller resolved from a bearer token."""

    id: str = Field(..., validation_alias="_id")
    role: str = "user"
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
