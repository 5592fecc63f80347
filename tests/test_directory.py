import pytest

from apps.helpdesk.tickets.actors import Role
from apps.helpdesk.tickets.directory import ReferenceData, UserDirectory

from factories import (
    AGENT_A,
    AGENT_B,
    CATEGORY_ID,
    FILER,
    LOCATION_ID,
    RETIRED_AGENT_ID,
    RETIRED_CATEGORY_ID,
    RETIRED_LOCATION_ID,
)


@pytest.mark.asyncio
async def test_get_user_maps_profile(directory: UserDirectory):
    profile = await directory.get_user(FILER.id)

    assert profile is not None
    assert profile.role is Role.ENDUSER
    assert profile.email == "ana@campus.edu"
    assert profile.department == "History"
    assert await directory.get_user("nobody") is None


@pytest.mark.asyncio
async def test_list_agents_returns_active_agents_by_name(directory: UserDirectory):
    agents = await directory.list_agents()

    assert [agent.id for agent in agents] == [AGENT_A.id, AGENT_B.id]
    assert all(agent.role is Role.AGENT for agent in agents)


@pytest.mark.asyncio
async def test_is_active_agent(directory: UserDirectory):
    assert await directory.is_active_agent(AGENT_A.id)
    assert not await directory.is_active_agent(RETIRED_AGENT_ID)
    assert not await directory.is_active_agent(FILER.id)
    assert not await directory.is_active_agent("nobody")


@pytest.mark.asyncio
async def test_reference_lookups_include_inactive_rows(reference_data: ReferenceData):
    category = await reference_data.get_category(RETIRED_CATEGORY_ID)
    location = await reference_data.get_location(LOCATION_ID)

    assert category is not None and category.active is False
    assert location is not None and location.building == "B1"
    assert await reference_data.get_category("cat-missing") is None


@pytest.mark.asyncio
async def test_reference_listings_hide_inactive_rows(reference_data: ReferenceData):
    categories = await reference_data.list_categories()
    locations = await reference_data.list_locations()

    assert [c.id for c in categories] == [CATEGORY_ID]
    assert [loc.id for loc in locations] == [LOCATION_ID]
    assert RETIRED_LOCATION_ID not in {loc.id for loc in locations}
