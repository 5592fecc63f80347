from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from apps.helpdesk.dependencies.auth import CurrentActor
from apps.helpdesk.dependencies.tickets import ReferenceDataDep

router = APIRouter(tags=["reference"])


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None


class LocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    building: str | None


@router.get("/categories", response_model=list[CategoryResponse], summary="Active ticket categories")
async def list_categories(reference_data: ReferenceDataDep, _: CurrentActor) -> list[CategoryResponse]:
    categories = await reference_data.list_categories()
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get("/locations", response_model=list[LocationResponse], summary="Active campus locations")
async def list_locations(reference_data: ReferenceDataDep, _: CurrentActor) -> list[LocationResponse]:
    locations = await reference_data.list_locations()
    return [LocationResponse.model_validate(location) for location in locations]
