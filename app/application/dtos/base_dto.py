# app/application/dtos/base_dto.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CustomBaseModel(BaseModel):
    """
    Base for all DTOs.

    Fields are snake_case in Python and camelCase on the wire
    (``access_token`` <-> ``accessToken``); both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
