"""Pydantic v2 schemas for request/response validation."""

from app.schemas.chat import ChatCreate, ChatResponse
from app.schemas.message import IMEnvelope, MessagePayload, MessageResponse, VectorScore

__all__ = [
    "ChatCreate",
    "ChatResponse",
    "IMEnvelope",
    "MessagePayload",
    "MessageResponse",
    "VectorScore",
]
