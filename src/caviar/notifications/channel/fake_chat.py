"""Fake chat adapter: records sent messages for testing."""

from caviar.notifications.channel.chat_port import ChannelError, ChatPort


class FakeChatAdapter(ChatPort):
    """Chat adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_messages: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "chat delivery failed"
        self.failing_recipients: set[int] = set()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "chat delivery failed",
        failing_recipients=None,
    ):
        """Configure the fake adapter behavior for testing.

        ``failing_recipients`` makes delivery fail for those ids only.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failing_recipients = set(failing_recipients or ())

    def send_message(self, recipient_id: int, text: str) -> None:
        if not self.should_succeed or recipient_id in self.failing_recipients:
            raise ChannelError(self.failure_reason)

        self.sent_messages.append({"recipient_id": recipient_id, "text": text})

    def messages_for(self, recipient_id: int) -> list[str]:
        return [m["text"] for m in self.sent_messages if m["recipient_id"] == recipient_id]

    def reset(self):
        """Clear sent messages (useful between tests)."""
        self.sent_messages.clear()
        self.should_succeed = True
        self.failure_reason = "chat delivery failed"
        self.failing_recipients = set()
