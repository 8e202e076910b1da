"""Tests for the User aggregate."""

import pytest
from caffinity.identity.events import UserLoggedIn, UserLoggedOut, UserRegistered
from caffinity.identity.user import LoginStatus, User, UserRole
from protean.exceptions import ValidationError


class TestRegister:
    def test_register_defaults_to_customer(self):
        user = User.register(username="maria", email="maria@example.com")
        assert user.role == UserRole.CUSTOMER.value
        assert user.login_status == LoginStatus.OFFLINE.value
        assert not user.is_admin()

    def test_register_admin(self):
        user = User.register(username="barista", role=UserRole.ADMIN.value)
        assert user.is_admin()

    def test_register_raises_event(self):
        user = User.register(username="maria")
        event = user._events[0]
        assert isinstance(event, UserRegistered)
        assert event.username == "maria"
        assert event.role == "Customer"

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValidationError):
            User.register(username="maria", role="Manager")


class TestSession:
    def test_log_in(self):
        user = User.register(username="maria")
        user.log_in()
        assert user.login_status == LoginStatus.ONLINE.value
        assert user.last_login_at is not None
        assert isinstance(user._events[-1], UserLoggedIn)

    def test_log_out(self):
        user = User.register(username="maria")
        user.log_in()
        user.log_out()
        assert user.login_status == LoginStatus.OFFLINE.value
        assert isinstance(user._events[-1], UserLoggedOut)

    def test_log_out_when_offline_is_rejected(self):
        user = User.register(username="maria")
        with pytest.raises(ValidationError):
            user.log_out()
