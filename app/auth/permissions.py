from typing import Dict, FrozenSet


from app.models.enums import RoleName


USER_SCOPES = frozenset(
    {
        "wishlist:manage",
        "test-drives:create",
        "test-drives:read",
        "test-drives:cancel",
    }
)

ADMIN_SCOPES = USER_SCOPES | frozenset(
    {
        "cars:create",
        "cars:update",
        "cars:delete",
        "ai:extract",
        "test-drives:manage",
        "dashboard:read",
        "settings:manage",
        "users:manage",
    }
)

ROLE_SCOPES: Dict[RoleName, FrozenSet[str]] = {
    RoleName.USER: USER_SCOPES,
    RoleName.ADMIN: ADMIN_SCOPES,
}


def scopes_for_role(role: RoleName) -> FrozenSet[str]:
    """
    Return the permission scopes granted to a role.

    Args:
        role: Role of the user

    Returns:
        Set of "resource:action" scope strings
    """
    return ROLE_SCOPES.get(role, frozenset())
