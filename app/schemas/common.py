# app/schemas/common.py
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

# Largest value an INTEGER / SERIAL id column holds.
MAX_ID = 2_147_483_647


class CamelModel(SQLModel):
    """
    Base for API payloads.

    Python attributes stay snake_case; JSON uses camelCase
    (`first_name` <-> `firstName`). Requests accept both spellings.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel):
    """
    Response envelope shared by every endpoint:
    `{success, message, ...payload}`.
    """

    success: bool = True
    message: str
