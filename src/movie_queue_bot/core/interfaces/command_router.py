"""Command router interface."""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from ..models import IncomingMessage, Intent


class ICommandRouter(ABC):
    """Interface for routing chat messages to bot commands."""

    @abstractmethod
    async def handle_message(self, message: IncomingMessage) -> Optional[Intent]:
        """Handle one inbound message.

        Args:
            message: Inbound chat message.

        Returns:
            The intent that was acted on, or None if the message was ignored.
        """
        pass

    @abstractmethod
    def submit(self, message: IncomingMessage) -> "asyncio.Task[Optional[Intent]]":
        """Handle a message as its own task.

        Args:
            message: Inbound chat message.

        Returns:
            The task handling the message.
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Wait for every in-flight message to finish."""
        pass
