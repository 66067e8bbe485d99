from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional, Set

from fastapi import HTTPException, status


def _code(x: Any) -> str:
    """
    Normalize a role code safely.
    Supports:
      - Enum -> enum.value
      - str  -> str
      - object with .role -> str/Enum
    """
    if x is None:
        return ""

    if isinstance(x, Enum):
        return str(x.value)

    if isinstance(x, str):
        return x

    if hasattr(x, "role"):
        return _code(getattr(x, "role"))

    return str(x)


def user_role(user: Any) -> str:
    return _code(user).strip().upper() if user else ""


def role_set(roles: Iterable[Any]) -> Set[str]:
    return {_code(r).strip().upper() for r in roles if _code(r).strip()}


def has_role(user: Any, roles: Iterable[Any]) -> bool:
    return user_role(user) in role_set(roles)


def require_any(user: Any, roles: Iterable[Any], *, message: Optional[str] = None) -> None:
    """
    Raise 403 if the user's role is not one of `roles`.
    """
    if has_role(user, roles):
        return

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=message or "Access denied",
    )
