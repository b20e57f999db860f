"""Chat message data models."""

from typing import Optional

from pydantic import BaseModel, Field


class IncomingMessage(BaseModel):
    """A message delivered by the chat transport."""

    text: str = Field(..., description="Message text")
    sender_id: str = Field(..., description="User id of the sender")
    ts: str = Field(..., description="Message timestamp, doubles as the thread reference")
    channel: Optional[str] = Field(None, description="Channel the message was posted in")


class MessageRef(BaseModel):
    """Reference to a message posted by the bot."""

    channel: Optional[str] = Field(None, description="Channel the message was posted in")
    ts: str = Field(..., description="Message timestamp")
