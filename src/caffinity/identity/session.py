"""Sign-in and sign-out — commands and handler.

Merging a guest cart into the user's cart is a separate step (ResolveCart),
issued by the API right after LogIn.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from caffinity.domain import caffinity
from caffinity.identity.user import User


@caffinity.command(part_of="User")
class LogIn:
    user_id = Identifier(required=True)


@caffinity.command(part_of="User")
class LogOut:
    user_id = Identifier(required=True)


@caffinity.command_handler(part_of=User)
class UserSessionHandler:
    @handle(LogIn)
    def log_in(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.log_in()
        repo.add(user)

    @handle(LogOut)
    def log_out(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.log_out()
        repo.add(user)
