"""Shared base model for API payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base for every payload.

    JSON uses camelCase keys (``serviceId``, ``expectedDeliveryDate``)
    as existing clients send them; snake_case names are accepted too.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
