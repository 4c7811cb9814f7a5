"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from caviar.domain import caviar
from caviar.identity.user import User


@caviar.command(part_of="User")
class RegisterUser:
    email = String(max_length=255)
    telegram_id = Integer()
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    username = String(max_length=100)


@caviar.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if not command.email and not command.telegram_id:
            raise ValidationError({"user": ["either email or telegram id is required"]})

        repo = current_domain.repository_for(User)
        if command.telegram_id and repo.telegram_id_taken(command.telegram_id):
            raise ValidationError({"telegram_id": [f"user with telegram id {command.telegram_id} already exists"]})

        user = User(
            email=command.email,
            telegram_id=command.telegram_id,
            first_name=command.first_name,
            last_name=command.last_name,
            username=command.username,
        )
        repo.add(user)
        return str(user.id)
