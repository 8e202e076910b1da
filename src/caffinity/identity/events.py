"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from caffinity.domain import caffinity


@caffinity.event(part_of="User")
class UserRegistered:
    """A new account was created for a customer or a staff member."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@caffinity.event(part_of="User")
class UserLoggedIn:
    __version__ = 1

    user_id = Identifier(required=True)
    logged_in_at = DateTime(required=True)


@caffinity.event(part_of="User")
class UserLoggedOut:
    __version__ = 1

    user_id = Identifier(required=True)
    logged_out_at = DateTime(required=True)
