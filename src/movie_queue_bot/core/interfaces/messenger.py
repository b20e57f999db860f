"""Messenger interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import MessageRef


class IMessenger(ABC):
    """Interface for the chat transport the bot replies through."""

    @abstractmethod
    async def reply(
        self,
        text: str,
        thread_ts: Optional[str] = None,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> MessageRef:
        """Post a message.

        Args:
            text: Message text (fallback text when blocks are given).
            thread_ts: Timestamp of the message to thread under.
            blocks: Structured layout blocks.

        Returns:
            Reference to the posted message.
        """
        pass

    @abstractmethod
    async def update_message(
        self, ref: MessageRef, blocks: List[Dict[str, Any]], text: str
    ) -> None:
        """Replace the content of a previously posted message.

        Args:
            ref: Message to update.
            blocks: New structured layout blocks.
            text: New fallback text.
        """
        pass
