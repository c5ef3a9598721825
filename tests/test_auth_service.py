"""Login, roles and the activity log."""

import pytest

from dress_rental.domain.models import UserRole
from dress_rental.services.auth_service import AuthService, Session, hash_password, verify_password
from dress_rental.services.errors import (
    AuthenticationError,
    PermissionDeniedError,
    ValidationError,
)


@pytest.fixture
def auth(connection):
    service = AuthService(connection)
    service.ensure_default_admin()
    return service


@pytest.fixture
def admin(auth):
    return auth.login("admin", "admin123")


class TestPasswords:
    def test_hash_is_salted(self):
        first = hash_password("secret1")
        assert first != hash_password("secret1")
        assert verify_password("secret1", first)
        assert not verify_password("secret2", first)


class TestLogin:
    def test_default_admin_created_once(self, auth):
        assert auth.ensure_default_admin() is None
        assert [user.username for user in auth.list_users()] == ["admin"]

    def test_login_returns_session(self, admin):
        assert admin.role == UserRole.ADMINISTRATOR
        assert admin.is_admin

    def test_wrong_password(self, auth):
        with pytest.raises(AuthenticationError):
            auth.login("admin", "nope")

    def test_inactive_user(self, auth, admin):
        user = auth.create_user(admin, "staff1", "password1", UserRole.STAFF)
        auth.set_user_active(admin, user.id, False)
        with pytest.raises(AuthenticationError, match="deactivated"):
            auth.login("staff1", "password1")

    def test_activity_is_logged(self, auth, admin):
        auth.logout(admin)
        actions = [entry.action for entry in auth.list_activity()]
        assert "User Login" in actions
        assert "User Logout" in actions


class TestRoles:
    def test_staff_cannot_create_users(self, auth, admin):
        auth.create_user(admin, "staff1", "password1", "Staff")
        staff = auth.login("staff1", "password1")
        assert not staff.has_permission(UserRole.ADMINISTRATOR)
        assert staff.has_permission(UserRole.STAFF)
        with pytest.raises(PermissionDeniedError):
            auth.create_user(staff, "staff2", "password2", "Staff")

    def test_admin_has_every_permission(self):
        session = Session(user_id=1, username="boss", role=UserRole.ADMINISTRATOR)
        assert session.has_permission(UserRole.STAFF)
        assert session.display_name == "boss"

    def test_duplicate_username(self, auth, admin):
        with pytest.raises(ValidationError):
            auth.create_user(admin, "admin", "password1", "Staff")

    def test_cannot_deactivate_self(self, auth, admin):
        with pytest.raises(ValidationError):
            auth.set_user_active(admin, admin.user_id, False)


class TestChangePassword:
    def test_change_password(self, auth, admin):
        auth.change_password(admin, "admin123", "newpass1")
        assert auth.login("admin", "newpass1").user_id == admin.user_id

    def test_wrong_current_password(self, auth, admin):
        with pytest.raises(AuthenticationError):
            auth.change_password(admin, "bad", "newpass1")

    def test_too_short(self, auth, admin):
        with pytest.raises(ValidationError):
            auth.change_password(admin, "admin123", "abc")
