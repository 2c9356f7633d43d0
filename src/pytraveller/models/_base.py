"""Base model for pytraveller value types.

Every value handed across the stream and renderer boundaries inherits from
:class:`TravellerBaseModel`, which provides:

* frozen instances: a state change always produces a new object.
* ``alias_generator=to_camel`` so ``model_dump(by_alias=True)`` yields the
  camelCase keys deck.gl expects (``minZoom``, ``sizeScale``, ...), while
  attributes stay snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TravellerBaseModel(BaseModel):
    """Base for immutable pytraveller models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_camel_dict(self) -> dict:
        """Dump with camelCase keys, as consumed by the renderer."""
        return self.model_dump(by_alias=True, mode="json")
