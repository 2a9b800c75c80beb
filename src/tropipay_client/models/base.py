"""Shared base model for Tropipay API payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TropipayModel(BaseModel):
    """Base model mapping snake_case attributes to the API's camelCase keys.

    Unknown keys are kept so that fields added by the API survive a round trip.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)


__all__ = ["TropipayModel"]
