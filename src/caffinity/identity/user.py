"""User aggregate — customers and staff share one record, told apart by role.

Admin and customer accounts differ only in what they may do, not in what they
store, so a role tag on a flat record replaces a class hierarchy.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from caffinity.domain import caffinity
from caffinity.identity.events import UserLoggedIn, UserLoggedOut, UserRegistered


class UserRole(Enum):
    ADMIN = "Admin"
    CUSTOMER = "Customer"


class LoginStatus(Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"


@caffinity.aggregate
class User:
    username = String(required=True, max_length=50, unique=True)
    email = String(max_length=254)
    full_name = String(max_length=150)
    phone = String(max_length=20)
    role = String(choices=UserRole, default=UserRole.CUSTOMER.value)
    login_status = String(choices=LoginStatus, default=LoginStatus.OFFLINE.value)
    registered_at = DateTime()
    last_login_at = DateTime()

    @classmethod
    def register(cls, username, email=None, full_name=None, phone=None, role=None):
        now = datetime.now(UTC)
        user = cls(
            username=username,
            email=email,
            full_name=full_name,
            phone=phone,
            role=role or UserRole.CUSTOMER.value,
            login_status=LoginStatus.OFFLINE.value,
            registered_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                username=username,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def is_admin(self):
        return UserRole(self.role) == UserRole.ADMIN

    def log_in(self):
        now = datetime.now(UTC)
        self.login_status = LoginStatus.ONLINE.value
        self.last_login_at = now
        self.raise_(UserLoggedIn(user_id=str(self.id), logged_in_at=now))

    def log_out(self):
        if LoginStatus(self.login_status) != LoginStatus.ONLINE:
            raise ValidationError({"login_status": ["User is not logged in"]})

        self.login_status = LoginStatus.OFFLINE.value
        self.raise_(UserLoggedOut(user_id=str(self.id), logged_out_at=datetime.now(UTC)))
