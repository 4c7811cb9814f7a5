"""Passwordless login through the chat channel."""

import secrets

import structlog
from protean.utils.globals import current_domain

from caviar.identity.otp import OTPStore
from caviar.identity.user import User
from caviar.notifications.channel import get_channel

logger = structlog.get_logger(__name__)

LOGIN_MESSAGE = "Your login code: <code>{code}</code>\nExpires in {minutes} minutes"


class LoginCodeService:
    def __init__(self, store: OTPStore, users=None):
        self.store = store
        self._users = users

    @property
    def users(self):
        if self._users is None:
            self._users = current_domain.repository_for(User)
        return self._users

    def request_code(self, telegram_id: int) -> None:
        """Issue a fresh code and deliver it to the user's chat account.

        Raises ``AppError`` NOT_FOUND when no user is linked to ``telegram_id``.
        """
        self.users.get_by_telegram_id(telegram_id)

        code = f"{secrets.randbelow(1_000_000):06d}"
        self.store.put(str(telegram_id), code)

        message = LOGIN_MESSAGE.format(code=code, minutes=int(self.store.ttl // 60))
        get_channel("telegram").send_message(telegram_id, message)
        logger.info("Login code issued", telegram_id=telegram_id)

    def verify_code(self, telegram_id: int, code: str) -> bool:
        valid = self.store.verify(str(telegram_id), code)
        if not valid:
            logger.info("Login code rejected", telegram_id=telegram_id)
        return valid
