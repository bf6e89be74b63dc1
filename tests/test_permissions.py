"""Validate role helpers and page access."""

from visitor_console.permissions import (
    get_accessible_pages, get_role_display_name, has_any_role, has_role,
    is_host, is_super_admin, STAFF_ROLES
)

from tests.factories import make_user


class TestRoles:
    """Validate role checks."""

    def test_has_role(self):
        assert has_role(make_user(role="admin"), "admin")
        assert not has_role(make_user(role="admin"), "security")
        assert not has_role(None, "admin")

    def test_has_any_role(self):
        assert has_any_role(make_user(role="reception"), STAFF_ROLES)
        assert not has_any_role(make_user(role="host"), STAFF_ROLES)
        assert not has_any_role(None, STAFF_ROLES)

    def test_shortcuts(self):
        assert is_super_admin(make_user(role="super_admin"))
        assert is_host(make_user(role="host"))
        assert not is_host(make_user(role="admin"))

    def test_display_name(self):
        assert get_role_display_name("super_admin") == "🔴 Super Admin"
        assert get_role_display_name("night_guard") == "Night Guard"


class TestAccessiblePages:
    """Validate navigation per role."""

    def names(self, role):
        return [p["name"] for p in get_accessible_pages(make_user(role=role))]

    def test_host(self):
        assert self.names("host") == ["Dashboard", "Visit Calendar"]

    def test_reception(self):
        assert self.names("reception") == ["Dashboard", "Check-In / Out", "Visit Calendar"]

    def test_security(self):
        assert "Audit Logs" in self.names("security")
        assert "Tenants" not in self.names("security")

    def test_super_admin(self):
        names = self.names("super_admin")
        assert "Tenants" in names
        assert "Check-In / Out" not in names
