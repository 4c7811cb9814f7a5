"""Notification dispatcher: broadcasts staff alerts over the enabled channels.

Recipients are resolved from the identity context: when a request names no
users, every active user with a linked chat account receives the message.
Messages go out in fixed-size batches with a pause between batches to stay
under the upstream rate limit. A failure for one recipient is recorded and
the batch carries on.
"""

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, IntEnum

import structlog
from protean.utils.globals import current_domain

from caviar.config import get_settings
from caviar.identity.user import User
from caviar.notifications.channel import get_channel
from caviar.notifications.templates.order_created import OrderCreatedTemplate
from caviar.shared.errors import AppError

logger = structlog.get_logger(__name__)


class NotificationChannel(Enum):
    TELEGRAM = "telegram"
    EMAIL = "email"
    SMS = "sms"


class Priority(IntEnum):
    LOW = 0
    NORMAL = 1
    HIGH = 2
    URGENT = 3


@dataclass
class NotificationRequest:
    title: str
    message: str
    channels: list[NotificationChannel] = field(
        default_factory=lambda: [NotificationChannel.TELEGRAM]
    )
    user_ids: list[str] = field(default_factory=list)
    priority: Priority = Priority.NORMAL
    metadata: dict = field(default_factory=dict)


@dataclass
class NotificationResult:
    channel: NotificationChannel
    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    processed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        return not self.errors


class NotificationDispatcher:
    def __init__(
        self,
        enabled_channels=None,
        batch_size: int | None = None,
        batch_delay: float | None = None,
        users=None,
    ):
        settings = get_settings()
        if enabled_channels is None:
            enabled_channels = settings.notification_channels
        self.enabled_channels = {NotificationChannel(c) for c in enabled_channels}
        self.batch_size = batch_size or settings.notification_batch_size
        self.batch_delay = (
            settings.notification_batch_delay if batch_delay is None else batch_delay
        )
        self._users = users

    @property
    def users(self):
        if self._users is None:
            self._users = current_domain.repository_for(User)
        return self._users

    def set_enabled_channels(self, channels) -> None:
        self.enabled_channels = {NotificationChannel(c) for c in channels}
        logger.info(
            "Updated enabled notification channels",
            channels=sorted(c.value for c in self.enabled_channels),
        )

    def send_order_created(self, order) -> list[NotificationResult]:
        request = NotificationRequest(
            title=OrderCreatedTemplate.title,
            message=OrderCreatedTemplate.render(order),
            channels=[NotificationChannel(c) for c in OrderCreatedTemplate.default_channels],
            priority=Priority.NORMAL,
            metadata={
                "order_id": str(order.id),
                "order_number": order.order_number,
                "total_amount": order.total_amount.amount,
            },
        )
        return self.send(request)

    def send(self, request: NotificationRequest) -> list[NotificationResult]:
        logger.info(
            "Sending notification",
            title=request.title,
            channels=[c.value for c in request.channels],
            priority=int(request.priority),
        )

        results = []
        for channel in request.channels:
            if channel not in self.enabled_channels:
                logger.debug("Channel not enabled, skipping", channel=channel.value)
                continue
            results.append(self._send_to_channel(channel, request))

        self._log_results(results)
        return results

    def _send_to_channel(self, channel, request) -> NotificationResult:
        if channel == NotificationChannel.TELEGRAM:
            return self._send_chat(request)

        result = NotificationResult(channel=channel)
        result.errors.append(f"{channel.value} notifications not implemented")
        return result

    def _send_chat(self, request) -> NotificationResult:
        result = NotificationResult(channel=NotificationChannel.TELEGRAM)

        try:
            users = self._target_users(request.user_ids)
        except AppError as exc:
            result.errors.append(f"failed to get target users: {exc}")
            return result

        recipients = [u for u in users if u.has_chat_account]
        if not recipients:
            logger.info("No users with a chat account found for notification")
            return result

        logger.info("Sending chat notification to users", user_count=len(recipients))
        adapter = get_channel(NotificationChannel.TELEGRAM.value)

        for start in range(0, len(recipients), self.batch_size):
            for user in recipients[start : start + self.batch_size]:
                try:
                    adapter.send_message(user.telegram_id, request.message)
                except Exception as exc:
                    logger.warning(
                        "Failed to send chat message to user",
                        telegram_id=user.telegram_id,
                        user_id=str(user.id),
                        error=str(exc),
                    )
                    result.failed += 1
                    result.errors.append(f"user {user.id}: {exc}")
                else:
                    result.success += 1

            if start + self.batch_size < len(recipients) and self.batch_delay:
                time.sleep(self.batch_delay)

        return result

    def _target_users(self, user_ids) -> list[User]:
        if not user_ids:
            return self.users.with_telegram_id()

        users = []
        for user_id in user_ids:
            try:
                users.append(self.users.get_by_id(user_id))
            except AppError as exc:
                logger.warning("Failed to get user by ID", user_id=user_id, error=str(exc))
        return users

    @staticmethod
    def _log_results(results) -> None:
        for result in results:
            if result.errors:
                logger.error(
                    "Notification channel had errors",
                    channel=result.channel.value,
                    success=result.success,
                    failed=result.failed,
                    error_count=len(result.errors),
                )
            else:
                logger.info(
                    "Notification sent successfully",
                    channel=result.channel.value,
                    success=result.success,
                    failed=result.failed,
                )
