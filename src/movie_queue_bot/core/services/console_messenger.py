"""Console messenger implementation."""

import itertools
import time
from typing import Any, Dict, List, Optional

import click

from ..interfaces import IMessenger
from ..models import MessageRef


class ConsoleMessenger(IMessenger):
    """Prints bot messages to the terminal.

    Stands in for the chat transport when running locally. Threaded replies
    are indented, and block updates print each section's text on its own line.
    """

    def __init__(self, channel: str = "console") -> None:
        self._channel = channel
        self._counter = itertools.count(1)

    def next_ts(self) -> str:
        """Generate a unique message timestamp in the chat transport's format."""
        return f"{time.time():.0f}.{next(self._counter):06d}"

    async def reply(
        self,
        text: str,
        thread_ts: Optional[str] = None,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> MessageRef:
        prefix = "  ↳ " if thread_ts else ""
        if blocks:
            for line in self._block_lines(blocks):
                click.echo(f"{prefix}{line}")
        elif text.strip():
            click.echo(f"{prefix}{text}")
        return MessageRef(channel=self._channel, ts=self.next_ts())

    async def update_message(
        self, ref: MessageRef, blocks: List[Dict[str, Any]], text: str
    ) -> None:
        for line in self._block_lines(blocks) or [text]:
            click.echo(f"  • {line}")

    @staticmethod
    def _block_lines(blocks: List[Dict[str, Any]]) -> List[str]:
        lines = []
        for block in blocks:
            for field in block.get("fields", []):
                lines.append(field.get("text", ""))
            if "text" in block and isinstance(block["text"], dict):
                lines.append(block["text"].get("text", ""))
        return lines
