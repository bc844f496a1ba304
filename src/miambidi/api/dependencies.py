"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Header, HTTPException, Request, status

from miambidi.domain.families import Family  # noqa: TC001
from miambidi.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from miambidi.containers import AppContainer


@dataclass(frozen=True)
class Actor:
    """The authenticated user and their current family."""

    user: UserRecord
    family: Family | None


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def get_actor(request: Request, x_user_id: str | None = Header(default=None)) -> Actor:
    """Resolve the caller from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        user_id = UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
    container = get_container(request)
    user = container.user_service.get_user(user_id)
    return Actor(user=user, family=container.family_service.find_family(user))
