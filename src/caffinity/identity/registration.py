"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from caffinity.domain import caffinity, logger
from caffinity.identity.user import User, UserRole


@caffinity.command(part_of="User")
class RegisterUser:
    """Create a new account. Role defaults to Customer."""

    username = String(required=True, max_length=50)
    email = String(max_length=254)
    full_name = String(max_length=150)
    phone = String(max_length=20)
    role = String(max_length=20, default=UserRole.CUSTOMER.value)


@caffinity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_username(command.username) is not None:
            raise ValidationError({"username": [f"Username '{command.username}' is already taken"]})

        user = User.register(
            username=command.username,
            email=command.email,
            full_name=command.full_name,
            phone=command.phone,
            role=command.role,
        )
        repo.add(user)
        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
