"""
Chat port interface for streamed, tool-enabled conversations.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any, Optional


class ChatPort(ABC):
    """Port interface for a chat runtime that can call tools."""

    @abstractmethod
    def stream_chat(
        self,
        messages: list[dict[str, Any]],
        system_message: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Run one assistant turn over ``messages`` and stream it.

        Args:
            messages: Conversation history as role/content dicts
            system_message: Optional system prompt override

        Returns:
            Async iterator of Server-Sent Events frames
        """
        pass

    def get_model_info(self) -> dict[str, Any]:
        """
        Get information about the current model configuration.

        Returns:
            Dictionary with model configuration details
        """
        return {"provider": "Unknown", "model": "Unknown"}
