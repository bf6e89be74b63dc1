"""
Role helpers for gating console features
"""

import streamlit as st
from typing import List, Optional, Iterable

from .schemas import User, UserRole

# Roles allowed to check visitors in and out at the desk
STAFF_ROLES = (UserRole.ADMIN.value, UserRole.SECURITY.value, UserRole.RECEPTION.value)

# Roles that see security stats, alerts and the audit trail on the dashboard
SECURITY_VIEW_ROLES = (UserRole.ADMIN.value, UserRole.SECURITY.value, UserRole.SUPER_ADMIN.value)


def _role(user: Optional[User]) -> Optional[str]:
    if user is None:
        return None
    return getattr(user.role, "value", user.role)


def has_role(user: Optional[User], role: str) -> bool:
    """Check if the user has exactly this role"""
    return _role(user) == role


def has_any_role(user: Optional[User], roles: Iterable[str]) -> bool:
    """Check if the user has any of the specified roles"""
    return _role(user) in set(roles)


def is_super_admin(user: Optional[User]) -> bool:
    return has_role(user, UserRole.SUPER_ADMIN.value)


def is_host(user: Optional[User]) -> bool:
    return has_role(user, UserRole.HOST.value)


def get_current_user() -> Optional[User]:
    """User the console is acting as, stored in session state"""
    return st.session_state.get("current_user")


def require_role(roles: Iterable[str], show_error: bool = True) -> bool:
    """
    Check the current user's role and optionally show an error message
    Returns True if permitted, False otherwise
    """
    if not has_any_role(get_current_user(), roles):
        if show_error:
            st.error("🚫 Access Denied: You don't have permission to access this feature.")
        return False
    return True


def get_accessible_pages(user: Optional[User]) -> List[dict]:
    """Get list of pages accessible to the user"""
    all_pages = [
        {"name": "Dashboard", "icon": "🏠", "file": "pages/1_🏠_Dashboard.py", "roles": None},
        {"name": "Check-In / Out", "icon": "🚪", "file": "pages/2_🚪_Check_In.py", "roles": STAFF_ROLES},
        {"name": "Visit Calendar", "icon": "📅", "file": "pages/3_📅_Visit_Calendar.py", "roles": None},
        {"name": "Security", "icon": "⚠️", "file": "pages/4_⚠️_Security.py", "roles": SECURITY_VIEW_ROLES},
        {"name": "Audit Logs", "icon": "📋", "file": "pages/5_📋_Audit_Logs.py", "roles": SECURITY_VIEW_ROLES},
        {"name": "Tenants", "icon": "🏢", "file": "pages/6_🏢_Tenants.py", "roles": (UserRole.SUPER_ADMIN.value,)},
    ]
    return [p for p in all_pages if p["roles"] is None or has_any_role(user, p["roles"])]


def get_role_display_name(role: str) -> str:
    """Get display name for role"""
    role_names = {
        "super_admin": "🔴 Super Admin",
        "admin": "🟠 Admin",
        "security": "🔵 Security",
        "reception": "🟢 Reception",
        "host": "🟣 Host",
        "approver": "🟡 Approver",
    }
    return role_names.get(role, role.replace("_", " ").title())
