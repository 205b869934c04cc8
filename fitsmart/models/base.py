"""Shared base model."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, accepting either spelling on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
