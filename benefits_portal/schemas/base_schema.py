from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(CamelModel):
    message: str


def reject_null(value):
    """For partial updates: a field may be left out, but not set to null."""
    if value is None:
        raise ValueError("may not be null")
    return value
