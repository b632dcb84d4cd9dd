import re
from pydantic import BaseModel, Field, ConfigDict


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class BaseSchema(BaseModel):
    """
    Schema with configuration to allow ORM mode for database models.
    """
    model_config = ConfigDict(from_attributes=True)


class Msg(BaseModel):
    """
    Schema for generic message responses.
    """
    message: str = Field(..., description="Response message content")


class PaginationMeta(BaseModel):
    """
    Schema for page-based pagination metadata.
    """
    total: int = Field(..., description="Total number of records matching filters")
    page: int = Field(..., description="Current page number, starting at 1")
    limit: int = Field(..., description="Maximum number of records per page")
    pages: int = Field(..., description="Total number of pages")


def validate_time_of_day(value: str) -> str:
    """
    Validate a 24h "HH:MM" time string.

    Args:
        value: Time string to check

    Returns:
        The same string when valid
    """
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value
