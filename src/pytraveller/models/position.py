"""Position sample model."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from pytraveller.models._base import TravellerBaseModel


class PositionSample(TravellerBaseModel):
    """One position reading of the tracked entity.

    Fields other than ``lat``/``lon``/``alt`` (for instance the server's
    ``timestamp``) are kept as pass-through extras. Coordinates must be
    real numbers: booleans and numeric strings are rejected.

    Parameters
    ----------
    lat : float
        Latitude in degrees.
    lon : float
        Longitude in degrees.
    alt : float
        Altitude; ``0`` when absent or ``null`` in the payload.
    """

    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    lat: float = Field(strict=True)
    lon: float = Field(strict=True)
    alt: float = Field(default=0.0, strict=True)

    @field_validator("alt", mode="before")
    @classmethod
    def _default_missing_alt(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @property
    def extras(self) -> dict[str, Any]:
        """Pass-through fields that are not part of the position itself."""
        return dict(self.model_extra or {})
