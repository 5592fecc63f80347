from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from apps.helpdesk.core.config import Settings
from apps.helpdesk.dependencies.auth import resolve_actor, role_required
from apps.helpdesk.tickets.actors import Actor, Role
from apps.helpdesk.tickets.models import UserProfile


def _profile(user_id: str, role: Role, *, active: bool = True) -> UserProfile:
    return UserProfile(
        id=user_id,
        email=f"{user_id}@campus.edu",
        full_name=user_id.title(),
        department=None,
        role=role,
        active=active,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(auth_tokens={"tok-agent": "agent-1", "tok-gone": "agent-2", "tok-orphan": "ghost"})


@pytest.fixture
def directory() -> AsyncMock:
    profiles = {
        "agent-1": _profile("agent-1", Role.AGENT),
        "agent-2": _profile("agent-2", Role.AGENT, active=False),
    }
    directory = AsyncMock()
    directory.get_user = AsyncMock(side_effect=lambda user_id: profiles.get(user_id))
    return directory


@pytest.mark.asyncio
async def test_resolve_actor_maps_token_to_role(settings, directory):
    actor = await resolve_actor("tok-agent", settings=settings, directory=directory)

    assert actor == Actor(id="agent-1", role=Role.AGENT)
    directory.get_user.assert_awaited_once_with("agent-1")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("token", "status_code"),
    [
        (None, 401),
        ("tok-unknown", 401),
        ("tok-orphan", 401),
        ("tok-gone", 403),
    ],
)
async def test_resolve_actor_rejects_bad_credentials(settings, directory, token, status_code):
    with pytest.raises(HTTPException) as excinfo:
        await resolve_actor(token, settings=settings, directory=directory)

    assert excinfo.value.status_code == status_code


@pytest.mark.asyncio
async def test_role_required_enforces_single_role():
    dependency = role_required(Role.ADMINISTRATOR)
    admin = Actor(id="admin-1", role=Role.ADMINISTRATOR)

    assert await dependency(admin) is admin
    with pytest.raises(HTTPException) as excinfo:
        await dependency(Actor(id="agent-1", role=Role.AGENT))
    assert excinfo.value.status_code == 403
