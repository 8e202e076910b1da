"""Repository for the User aggregate."""

from caffinity.domain import caffinity
from caffinity.identity.user import User


@caffinity.repository(part_of=User)
class UserRepository:
    def find_by_username(self, username: str) -> User | None:
        users = self._dao.query.filter(username=username).all().items
        return users[0] if users else None
