"""Shared schema configuration."""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema speaking the stored field names (camelCase) on the wire.

    Snake-case names are accepted on input too. Timestamps are stored as naive
    UTC and go out with an explicit UTC offset.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_serializer("*", mode="wrap")
    def serialize_timestamps(self, value, handler):
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return handler(value)
