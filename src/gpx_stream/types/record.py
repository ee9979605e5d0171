"""
Value types flowing through the transcode pipeline.

A Record is what the decoder produces for one structural unit of input;
a Coordinate is the validated projection the encoder writes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class Record:
    """One decoded record with its fixed field set.

    Fields hold the raw attribute text exactly as read; ``None`` means the
    attribute was absent, which is a valid state.

    Attributes:
        lat: Raw latitude text
        lon: Raw longitude text
        extras: Auxiliary fields requested through configuration
    """

    lat: str | None = None
    lon: str | None = None
    extras: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str | None:
        """Get a field value by name."""
        if name == "lat":
            return self.lat
        if name == "lon":
            return self.lon
        return self.extras.get(name)


class Coordinate(BaseModel):
    """Validated output value: exactly a latitude and a longitude."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: Decimal | float = Field(description="Latitude")
    lon: Decimal | float = Field(description="Longitude")
