from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema for the public API.

    Attributes are snake_case in Python and camelCase on the wire
    (num_employees <-> numEmployees). Either spelling is accepted on input.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class RequestModel(CamelModel):
    """Request bodies reject fields they do not declare."""

    class Config:
        extra = "forbid"


def reject_null(value):
    """Field validator body for optional update fields whose column is NOT NULL."""
    if value is None:
        raise ValueError("may not be null")
    return value
