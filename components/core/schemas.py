"""Core schemas for the application."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys, accepting either spelling on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class Message(BaseModel):
    """Schema for plain acknowledgement responses."""
    message: str
