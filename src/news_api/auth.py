"""Caller identity as forwarded by the identity gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException

from common.errors import PreconditionFailure

SERVICE_ROLE = "service_role"


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: str = "authenticated"

    @property
    def is_service(self) -> bool:
        return self.role == SERVICE_ROLE


def get_caller(
    x_user_id: Annotated[str | None, Header(description="Verified user id from the identity gateway")] = None,
    x_user_role: Annotated[str | None, Header(description="Verified role from the identity gateway")] = None,
) -> Caller | None:
    """Return the calling user, or None for anonymous requests."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    return Caller(user_id=user_id, role=(x_user_role or "authenticated").strip())


def require_caller(caller: Annotated[Caller | None, Depends(get_caller)]) -> Caller:
    if caller is None:
        raise PreconditionFailure(PreconditionFailure.AUTHENTICATION_REQUIRED, "Authentication required")
    return caller


def require_service_role(caller: Annotated[Caller, Depends(require_caller)]) -> Caller:
    if not caller.is_service:
        raise HTTPException(status_code=403, detail="Service role required")
    return caller
