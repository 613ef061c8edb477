"""Message Pydantic schemas.

Bodies use camelCase keys on the wire; snake_case names are accepted too.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VectorScore(BaseModel):
    """Relevance of one knowledge vector to a message."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    vector: str = ""
    score: float = 0.0


class MessagePayload(BaseModel):
    """Schema for message bodies sent to add/update/delete."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    owner: str = Field(default="admin", max_length=100)
    name: str = Field(default="", max_length=100)
    created_time: str = Field(default="", max_length=100)
    organization: str = Field(default="", max_length=100)
    user: str = Field(default="", max_length=100)
    chat: str = Field(default="", max_length=100)
    reply_to: str = Field(default="", max_length=100)
    author: str = Field(default="", max_length=100)
    text: str = ""
    error_text: str = ""
    file_name: str = Field(default="", max_length=100)
    vector_scores: list[VectorScore] = Field(default_factory=list)
    is_regenerated: bool = False
    need_notify: bool = False


class MessageResponse(BaseModel):
    """Schema for message responses."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    owner: str
    name: str
    created_time: str
    organization: str
    user: str
    chat: str
    reply_to: str
    author: str
    text: str
    error_text: str
    file_name: str
    vector_scores: list[VectorScore] | None = None
    need_notify: bool = False


class IMEnvelope(BaseModel):
    """Envelope handed to the IM bridge for Signal chats."""

    model_config = ConfigDict(populate_by_name=True)

    body: MessageResponse = Field(alias="Body")
