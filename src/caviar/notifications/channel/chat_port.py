"""Chat channel port: abstract interface for chat-bot message delivery."""

from abc import ABC, abstractmethod


class ChannelError(Exception):
    """Raised by an adapter when a single message could not be delivered."""


class ChatPort(ABC):
    """Abstract interface for chat dispatch adapters."""

    @abstractmethod
    def send_message(self, recipient_id: int, text: str) -> None:
        """Deliver ``text`` to one chat account.

        Raises:
            ChannelError: when the upstream service rejects the message.
        """
        ...
