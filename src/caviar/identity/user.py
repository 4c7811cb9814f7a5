"""User aggregate: staff accounts that can receive chat notifications."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Integer, String

from caviar.domain import caviar


def _now():
    return datetime.now(UTC)


@caviar.aggregate
class User:
    email: String(max_length=255)
    telegram_id: Integer()
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    username: String(max_length=100)
    is_active: Boolean(default=True)
    created_at: DateTime(default=_now)
    updated_at: DateTime(default=_now)

    @property
    def has_chat_account(self) -> bool:
        return self.telegram_id is not None and self.telegram_id > 0
