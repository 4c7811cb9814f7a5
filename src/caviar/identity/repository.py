from protean.exceptions import ObjectNotFoundError

from caviar.domain import caviar
from caviar.identity.user import User
from caviar.shared.errors import AppError


@caviar.repository(part_of=User)
class UserRepository:
    def get_by_id(self, user_id) -> User:
        try:
            return self.get(user_id)
        except ObjectNotFoundError:
            raise AppError.not_found(f"user {user_id} not found") from None
        except Exception as exc:
            raise AppError.from_storage(exc, "retrieve user") from exc

    def get_by_telegram_id(self, telegram_id: int) -> User:
        try:
            users = self._dao.query.filter(telegram_id=telegram_id).all().items
        except Exception as exc:
            raise AppError.from_storage(exc, "retrieve user") from exc
        if not users:
            raise AppError.not_found(f"user with telegram id {telegram_id} not found")
        return users[0]

    def with_telegram_id(self) -> list[User]:
        """Active users linked to a chat account."""
        try:
            users = self._dao.query.filter(is_active=True).limit(None).all().items
        except Exception as exc:
            raise AppError.from_storage(exc, "list users") from exc
        return [u for u in users if u.has_chat_account]

    def telegram_id_taken(self, telegram_id: int) -> bool:
        return bool(self._dao.query.filter(telegram_id=telegram_id).all().items)
