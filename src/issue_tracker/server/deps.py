"""FastAPI dependencies resolving the caller and checking route-level permissions."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from fastapi import Depends, Header

from ..context import AppContext
from ..domain.models import Identity
from ..policy import Action, authorize


def identity_dependency(get_context: Callable[[], AppContext]) -> Callable[..., Awaitable[Identity]]:
    """Build a FastAPI dependency resolving the bearer token to an :class:`Identity`."""

    async def _identity(authorization: Optional[str] = Header(None)) -> Identity:
        return get_context().auth.authenticate_header(authorization)

    return _identity


def action_dependency(get_context: Callable[[], AppContext], action: Action) -> Callable[..., Awaitable[Identity]]:
    """Like :func:`identity_dependency`, but also requires *action* at ``Scope.ANY``.

    Runs before the request body is validated, so a caller without the role
    gets FORBIDDEN rather than a validation error.
    """
    current_identity = identity_dependency(get_context)

    async def _guard(identity: Identity = Depends(current_identity)) -> Identity:
        authorize(identity, action)
        return identity

    return _guard
