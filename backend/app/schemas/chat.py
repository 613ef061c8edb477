"""Chat Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatCreate(BaseModel):
    """Schema for creating a chat."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    owner: str = Field(default="admin", max_length=100)
    name: str = Field(default="", max_length=100)
    organization: str = Field(default="", max_length=100)
    display_name: str = Field(default="", max_length=100)
    category: str = Field(default="Default Category", max_length=100)
    type: str = Field(default="AI", max_length=100, description="AI, Signal, or any other type")
    user: str = Field(default="", max_length=100)


class ChatResponse(BaseModel):
    """Schema for chat responses."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    owner: str
    name: str
    created_time: str
    updated_time: str
    organization: str
    display_name: str
    category: str
    type: str
    user: str
    message_count: int = 0
