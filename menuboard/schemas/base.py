"""
Shared Pydantic configuration: camelCase on the wire, snake_case in Python.
"""
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Names and categories are trimmed before the non-empty check
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class CamelModel(BaseModel):
    """Base model whose JSON keys are camelCase; either spelling is accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_payload(self) -> dict:
        """JSON-ready dict in wire shape, for socket events."""
        return self.model_dump(mode="json", by_alias=True)
