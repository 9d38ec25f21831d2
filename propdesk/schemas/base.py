"""Base model for request bodies that become stored document fields.

Stored documents use the web client's camelCase field names; request bodies
accept either camelCase or snake_case and dump to camelCase.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoreFieldsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",
        validate_default=True,
    )

    def to_store(self) -> dict[str, Any]:
        """Only the fields the caller sent, keyed by stored (camelCase) name."""
        return self.model_dump(by_alias=True, exclude_unset=True)
