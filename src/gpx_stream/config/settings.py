"""
Configuration model for a transcode run.

Describes where records live in the input, which fields are read and how
numbers are carried to the output.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHUNK_SIZE = 64 * 1024


class TranscodeConfig(BaseModel):
    """Settings for the tokenizer, decoder, encoder and logging.

    Example:
        >>> config = TranscodeConfig(record_tag="trkpt")
        >>> config.envelope_tag
        'gpx'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    envelope_tag: str = Field(default="gpx", description="Local name of the document root")
    record_tag: str = Field(default="wpt", description="Local name of record elements")
    lat_field: str = Field(default="lat", description="Attribute holding the latitude")
    lon_field: str = Field(default="lon", description="Attribute holding the longitude")
    extra_fields: list[str] = Field(
        default_factory=list,
        description="Auxiliary attributes kept on decoded records",
    )
    number_mode: Literal["decimal", "float"] = Field(
        default="decimal", description="Numeric policy: exact decimal or binary float"
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, gt=0, description="Bytes read from the source per pull"
    )
    http_timeout: float = Field(default=30.0, gt=0, description="HTTP source timeout in seconds")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["text", "json"] = Field(default="text", description="Log output format")

    @field_validator("envelope_tag", "record_tag", "lat_field", "lon_field")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
