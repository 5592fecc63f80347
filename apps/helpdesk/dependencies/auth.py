from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from apps.helpdesk.core.config import Settings, get_settings
from apps.helpdesk.tickets.actors import Actor, Role
from apps.helpdesk.tickets.directory import UserDirectory

bearer_scheme = HTTPBearer(auto_error=False)


async def get_user_directory(request: Request) -> UserDirectory:
    directory = getattr(request.app.state, "user_directory", None)
    if directory is None:
        raise HTTPException(status_code=503, detail="User directory is not available")
    return directory


async def resolve_actor(token: str | None, *, settings: Settings, directory: UserDirectory) -> Actor:
    """Map a bearer token to the acting user and their single role.

    Tokens are issued outside this service; ``Settings.auth_tokens`` only records
    which user id each one belongs to.
    """

    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = settings.auth_tokens.get(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    profile = await directory.get_user(user_id)
    if profile is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")
    if not profile.active:
        raise HTTPException(status_code=403, detail="Account is disabled")
    return Actor(id=profile.id, role=profile.role)


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> Actor:
    cached = getattr(request.state, "actor", None)
    if isinstance(cached, Actor):
        return cached

    token = credentials.credentials if credentials is not None else None
    actor = await resolve_actor(token, settings=settings, directory=directory)
    request.state.actor = actor
    return actor


def role_required(role: Role) -> Callable[[Actor], Awaitable[Actor]]:
    """Dependency factory ensuring the current actor holds the requested role."""

    async def dependency(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
        if not actor.has_role(role):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return actor

    return dependency


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
