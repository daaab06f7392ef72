"""
Shared pydantic base for MockPrep schemas.

Field names are snake_case in Python and camelCase on the wire and in
MongoDB documents.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_wire(self, **kwargs) -> dict:
        """Dump using camelCase aliases in JSON-compatible form."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)
