"""
CRM - Role guards
Pure predicates over the user already resolved by the authentication gate,
plus FastAPI dependency factories wrapping them. Guards never touch the store.
"""

import logging
from typing import Iterable
from fastapi import Depends, HTTPException

from crm_backend.config import ROLE_ADMIN, ROLE_MANAGER, ROLE_AGENT

logger = logging.getLogger("permissions")


# ════════════════════════════════════════════════════════════════════════
# PREDICATES
# ════════════════════════════════════════════════════════════════════════

def is_admin(user: dict) -> bool:
    return user.get("role") == ROLE_ADMIN


def has_role(user: dict, roles: Iterable[str]) -> bool:
    return user.get("role") in tuple(roles)


def build_owner_filter(user: dict, field: str = "agentID") -> dict:
    """
    Store filter for ownership-scoped lists.
    admin -> no filter, anyone else -> {field: user.id}
    """
    if is_admin(user):
        return {}
    return {field: user["id"]}


def can_access_owned(user: dict, record: dict, field: str = "agentID") -> bool:
    return is_admin(user) or record.get(field) == user.get("id")


# ════════════════════════════════════════════════════════════════════════
# FASTAPI DEPENDENCIES
# ════════════════════════════════════════════════════════════════════════

def require_roles(*roles: str, detail: str):
    """
    FastAPI dependency factory, evaluated after get_current_user.
    Usage: user: dict = Depends(require_roles("admin", detail="..."))
    """
    from crm_backend.routes.auth import get_current_user

    async def _check(user: dict = Depends(get_current_user)):
        if not has_role(user, roles):
            logger.warning(
                f"[PERMISSION_DENIED] user={user.get('email')} "
                f"role={user.get('role')} required={list(roles)}"
            )
            raise HTTPException(status_code=403, detail=detail)
        return user

    return _check


def require_admin():
    return require_roles(ROLE_ADMIN, detail="Access denied. Admin privileges required.")


def require_agent_or_admin():
    return require_roles(ROLE_AGENT, ROLE_ADMIN, detail="Access denied. Agent privileges required.")


def require_manager_or_admin():
    return require_roles(ROLE_MANAGER, ROLE_ADMIN, detail="Access denied. Manager privileges required.")
